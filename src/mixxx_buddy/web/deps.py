from fastapi import Request

from mixxx_buddy.domain.session.store import SnapshotStore


def get_store(request: Request) -> SnapshotStore:
    """FastAPI dependency for the snapshot store owned by the app."""
    return request.app.state.store
