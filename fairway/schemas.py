"""Pydantic schemas for league settings and configuration files."""

from typing import Optional

from pydantic import BaseModel, Field, field_validator

from .constants import (
    AddTeamStrategy,
    ByePointsMode,
    CourseSide,
    PlayMode,
    PointScalePreset,
    RemoveTeamAction,
    Rounding,
    ScheduleType,
    ScoreSelection,
    ScoringType,
    TieMode,
)


def _check_descending(scale: Optional[list[float]]) -> Optional[list[float]]:
    if scale is None:
        return scale
    for previous, current in zip(scale, scale[1:]):
        if current > previous:
            raise ValueError('Point scale must be in descending order (highest points first)')
    return scale


class HandicapSettings(BaseModel):
    """
    Every knob of the handicap calculation, fully populated.

    Instances are immutable. Build variations with
    ``fairway.config.build_handicap_settings`` or ``model_copy(update=...)``.
    Contradictory combinations (max below min, best_of above last_of) are
    accepted here; the calculator absorbs them with a warning.
    """

    # Basic formula
    base_score: float = 35
    multiplier: float = 0.9
    rounding: Rounding = Rounding.FLOOR
    default_handicap: float = 0
    max_handicap: Optional[float] = 9
    min_handicap: Optional[float] = None

    # Score selection
    score_selection: ScoreSelection = ScoreSelection.ALL
    score_count: Optional[int] = None
    best_of: Optional[int] = None
    last_of: Optional[int] = None
    drop_highest: int = 0
    drop_lowest: int = 0

    # Recency weighting
    use_weighting: bool = False
    weight_recent: float = 1.5
    weight_decay: float = 0.9

    # Exceptional score handling
    cap_exceptional: bool = False
    exceptional_cap: Optional[float] = None

    # Time-based rules
    prov_weeks: int = 0
    prov_multiplier: float = 1.0
    freeze_week: Optional[int] = None
    use_trend: bool = False
    trend_weight: float = 0.1

    # Administrative
    require_approval: bool = False

    class Config:
        extra = 'forbid'
        frozen = True


class LeagueHandicapRecord(BaseModel):
    """
    Stored league record as handed over by the persistence layer.

    Keys use the stored column names (``handicapBaseScore`` ...). The first
    five fields are required; ``handicapMax`` must be present but may be null.
    """

    base_score: float = Field(..., alias='handicapBaseScore', allow_inf_nan=False)
    multiplier: float = Field(..., alias='handicapMultiplier', allow_inf_nan=False)
    rounding: Rounding = Field(..., alias='handicapRounding')
    default_handicap: float = Field(..., alias='handicapDefault', allow_inf_nan=False)
    max_handicap: Optional[float] = Field(..., alias='handicapMax', allow_inf_nan=False)

    min_handicap: Optional[float] = Field(None, alias='handicapMin')
    score_selection: ScoreSelection = Field(ScoreSelection.ALL, alias='handicapScoreSelection')
    score_count: Optional[int] = Field(None, alias='handicapScoreCount')
    best_of: Optional[int] = Field(None, alias='handicapBestOf')
    last_of: Optional[int] = Field(None, alias='handicapLastOf')
    drop_highest: int = Field(0, alias='handicapDropHighest')
    drop_lowest: int = Field(0, alias='handicapDropLowest')
    use_weighting: bool = Field(False, alias='handicapUseWeighting')
    weight_recent: float = Field(1.5, alias='handicapWeightRecent')
    weight_decay: float = Field(0.9, alias='handicapWeightDecay')
    cap_exceptional: bool = Field(False, alias='handicapCapExceptional')
    exceptional_cap: Optional[float] = Field(None, alias='handicapExceptionalCap')
    prov_weeks: int = Field(0, alias='handicapProvWeeks')
    prov_multiplier: float = Field(1.0, alias='handicapProvMultiplier')
    freeze_week: Optional[int] = Field(None, alias='handicapFreezeWeek')
    use_trend: bool = Field(False, alias='handicapUseTrend')
    trend_weight: float = Field(0.1, alias='handicapTrendWeight')
    require_approval: bool = Field(False, alias='handicapRequireApproval')

    @field_validator(
        'score_selection',
        'drop_highest',
        'drop_lowest',
        'use_weighting',
        'weight_recent',
        'weight_decay',
        'cap_exceptional',
        'prov_weeks',
        'prov_multiplier',
        'use_trend',
        'trend_weight',
        'require_approval',
        mode='before',
    )
    @classmethod
    def null_means_default(cls, v, info):
        """Stored nulls in optional columns fall back to the column default."""
        if v is None:
            return cls.model_fields[info.field_name].default
        return v

    class Config:
        extra = 'ignore'
        populate_by_name = True


class StrokePlayBonusConfig(BaseModel):
    """Participation and performance bonuses for stroke play weeks."""

    show_up_bonus: float = 0
    beat_handicap_bonus: float = 0
    base_score: float = 35
    dnp_points: float = 0
    dnp_penalty: float = 0

    class Config:
        extra = 'forbid'
        frozen = True


class ScoringConfig(BaseModel):
    """League scoring configuration (points regime and stroke play options)."""

    scoring_type: ScoringType = ScoringType.MATCH_PLAY
    point_preset: PointScalePreset = PointScalePreset.LINEAR
    point_scale: Optional[list[float]] = None
    show_up_bonus: float = Field(0, ge=0)
    beat_handicap_bonus: float = Field(0, ge=0)
    dnp_points: float = Field(0, ge=0)
    dnp_penalty: float = Field(0, le=0)
    tie_mode: TieMode = TieMode.SPLIT
    max_dnp: Optional[int] = Field(None, ge=1)
    pro_rate: bool = False
    hybrid_field_weight: float = Field(0.5, ge=0, le=1)
    hybrid_field_point_scale: Optional[list[float]] = None

    @field_validator('point_scale', 'hybrid_field_point_scale')
    @classmethod
    def validate_scale(cls, v):
        """Ensure point scales are non-negative and highest first."""
        if v is not None and any(points < 0 for points in v):
            raise ValueError('Point scale values must be non-negative')
        return _check_descending(v)

    def bonus_config(self, base_score: float) -> StrokePlayBonusConfig:
        """Bonus parameters for the stroke play engine."""
        return StrokePlayBonusConfig(
            show_up_bonus=self.show_up_bonus,
            beat_handicap_bonus=self.beat_handicap_bonus,
            base_score=base_score,
            dnp_points=self.dnp_points,
            dnp_penalty=self.dnp_penalty,
        )

    class Config:
        extra = 'forbid'


class ScheduleConfig(BaseModel):
    """League schedule configuration."""

    schedule_type: Optional[ScheduleType] = None
    bye_points_mode: ByePointsMode = ByePointsMode.FLAT
    bye_points_flat: float = Field(10, ge=0)
    mid_season_add_default: AddTeamStrategy = AddTeamStrategy.START_FROM_HERE
    mid_season_remove_action: RemoveTeamAction = RemoveTeamAction.BYE_OPPONENTS
    play_mode: PlayMode = PlayMode.FULL_18
    play_mode_first_week_side: CourseSide = CourseSide.FRONT

    @property
    def is_double_round_robin(self) -> bool:
        return self.schedule_type == ScheduleType.DOUBLE_ROUND_ROBIN

    class Config:
        extra = 'forbid'


class LeagueConfigFile(BaseModel):
    """Complete league_config.json file structure."""

    name: str = Field(..., min_length=1)
    handicap: dict = Field(default_factory=dict)
    scoring: ScoringConfig = Field(default_factory=ScoringConfig)
    schedule: ScheduleConfig = Field(default_factory=ScheduleConfig)

    class Config:
        extra = 'forbid'
