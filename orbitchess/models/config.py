from pydantic import BaseModel, ConfigDict, Field

from .enums import HeatTiming, PieceType


def _default_deploy_costs() -> dict[PieceType, int]:
    return {
        PieceType.QUEEN: 9,
        PieceType.ROOK: 5,
        PieceType.BISHOP: 3,
        PieceType.KNIGHT: 3,
        PieceType.PAWN: 1,
    }


class Belt(BaseModel):
    """Inclusive rank/column window used for static hazard placement.

    Ranks are board ranks (rank 1 is White's back rank, i.e. row ``rows - 1``).
    """

    model_config = ConfigDict(frozen=True)

    rank_min: int
    rank_max: int
    col_min: int
    col_max: int


class RulesConfig(BaseModel):
    """Tunable rule constants. Immutable so clones can share one instance."""

    model_config = ConfigDict(frozen=True)

    # setup
    formation: tuple[PieceType, ...] = (
        PieceType.ROOK,
        PieceType.KNIGHT,
        PieceType.BISHOP,
        PieceType.QUEEN,
        PieceType.KING,
        PieceType.BISHOP,
        PieceType.KNIGHT,
        PieceType.ROOK,
    )
    planet_count: int = 3
    planet_belt: Belt = Belt(rank_min=4, rank_max=7, col_min=4, col_max=16)
    star_belt: Belt = Belt(rank_min=5, rank_max=6, col_min=9, col_max=10)
    placement_tries: int = 1000

    # hazards
    comet_horizontal_chance: float = Field(default=0.35, ge=0.0, le=1.0)
    comet_vertical_chance: float = Field(default=0.20, ge=0.0, le=1.0)
    asteroid_vertical_chance: float = Field(default=0.12, ge=0.0, le=1.0)
    asteroid_horizontal_chance: float = Field(default=0.18, ge=0.0, le=1.0)
    comet_belt_rows: tuple[int, int] = (2, 7)
    edge_band_depth: int = 4
    seed_increment: int = 0x9E3779B9

    # economy
    deploy_costs: dict[PieceType, int] = Field(default_factory=_default_deploy_costs)

    heat_timing: HeatTiming = HeatTiming.END_OF_ACTION

    def deploy_cost(self, piece_type: PieceType) -> int | None:
        return self.deploy_costs.get(piece_type)

    def with_spawn_chance(self, chance: float) -> "RulesConfig":
        """Copy with every spawn roll forced to ``chance`` (handy for 0.0 / 1.0)."""
        return self.model_copy(
            update={
                "comet_horizontal_chance": chance,
                "comet_vertical_chance": chance,
                "asteroid_vertical_chance": chance,
                "asteroid_horizontal_chance": chance,
            }
        )


DEFAULT_RULES = RulesConfig()
