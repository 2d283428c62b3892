from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

MaterialType = Literal["Video", "Audio", "Other"]
FanZoneItemType = Literal["opening", "music", "match", "entertainment", "closing"]

MATERIAL_TYPES = ("Video", "Audio", "Other")
FAN_ZONE_ITEM_TYPES = ("opening", "music", "match", "entertainment", "closing")


class Record(BaseModel):
    # Stored documents use camelCase keys (teamAId, runningOrder, ...)
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def dump(self) -> dict:
        return self.model_dump(by_alias=True)


class Stadium(Record):
    id: str
    name1: str  # Language 1
    name2: str  # Language 2
    city1: str
    city2: str


class Team(Record):
    id: str
    name1: str
    name2: str


class Branding(Record):
    logo: str  # legacy, kept in sync with Competition.logo_data_url
    primary_color: str = "#8D0000"
    secondary_color: str = "#B50000"


class Competition(Record):
    name1: str
    name2: str
    name: str  # legacy single-name field
    start_date: str  # ISO8601
    end_date: str  # ISO8601
    logo_data_url: str
    stadiums: List[Stadium]
    teams: List[Team]
    branding: Branding


class RunningOrderItem(Record):
    id: str
    time: str  # "-00:30:00", "+00:10:00", "HT+00:05", "19:30"
    title: str = ""
    description1: str = ""
    material_type: MaterialType = "Other"
    audio: bool = False
    responsible: str = ""
    loop: bool = False
    script1: str = ""
    script2: str = ""
    giant_screen: str = ""
    pitch_led: str = ""
    led_ring: str = ""
    ring_led: str = ""  # alias of led_ring
    graphics_produced: str = ""
    lights: str = ""
    duration: str = ""
    notes: str = ""
    audio_option: str = "No audio"  # derived from audio_sources
    audio_sources: List[str] = Field(default_factory=list)
    video_type: str = "One Play"
    category: str = ""
    active: bool = True


class RunningOrderCategory(Record):
    id: str
    name: str
    # Legacy embedded list; RunningOrderItem.category is the source of truth.
    items: List[RunningOrderItem] = Field(default_factory=list)


class MatchConfig(Record):
    team_a_id: str = ""
    team_b_id: str = ""
    stadium_id: str = ""
    match_time: str = ""
    extra_notes: str = ""
    use_generic_teams: bool = False


class AppData(Record):
    competition: Competition
    running_order: List[RunningOrderItem]
    categories: List[RunningOrderCategory]
    selected_venue: str
    match_config: MatchConfig
    data_version: int


class FanZoneScreens(Record):
    screen1: str = ""  # on-ground
    screen2: str = ""  # screens
    screen3: str = ""  # audio


class FanZoneItem(Record):
    id: str
    type: FanZoneItemType = "music"
    time: str = ""
    title: str = ""
    screens: FanZoneScreens = Field(default_factory=FanZoneScreens)
    notes: str = ""


class FanZoneSchedule(Record):
    id: str
    name: str
    date: Optional[str] = None
    items: List[FanZoneItem] = Field(default_factory=list)
