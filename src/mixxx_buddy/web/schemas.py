from typing import Optional

from pydantic import BaseModel


class TrackOut(BaseModel):
    bpm: float
    artist: str
    title: str
    duration: float
    crates: str
    playlists: str

    model_config = {"frozen": True}  # Immutable


class HealthResponse(BaseModel):
    status: str
    track_count: int
    updated_at: Optional[str] = None  # ISO-8601, None before the first poll
