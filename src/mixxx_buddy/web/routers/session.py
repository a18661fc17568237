from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response
from loguru import logger
from pydantic import TypeAdapter
from pydantic_core import PydanticSerializationError

from mixxx_buddy.domain.session.models import TrackSnapshot
from mixxx_buddy.domain.session.store import SnapshotStore

from ..deps import get_store
from ..schemas import TrackOut

router = APIRouter()

_tracks_adapter = TypeAdapter(list[TrackOut])


def serialize_snapshot(snapshot: TrackSnapshot) -> bytes:
    """Pure function - encode a snapshot as a JSON array of track objects."""
    tracks = [TrackOut.model_validate(track, from_attributes=True) for track in snapshot]
    return _tracks_adapter.dump_json(tracks)


@router.get("/data", response_model=list[TrackOut])
def get_session_data(store: SnapshotStore = Depends(get_store)) -> Response:
    """Latest committed snapshot. Never triggers a database query."""
    snapshot = store.current()
    try:
        payload = serialize_snapshot(snapshot)
    except (ValueError, TypeError, PydanticSerializationError) as e:
        logger.error(f"Error encoding snapshot as JSON: {e}")
        raise HTTPException(500, "Internal error")

    return Response(content=payload, media_type="application/json")
