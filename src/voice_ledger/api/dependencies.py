from typing import Annotated

from fastapi import Header, HTTPException, Request

from voice_ledger.services.voice import VoiceTransactionPipeline


def get_pipeline(request: Request) -> VoiceTransactionPipeline:
    pipeline = getattr(request.app.state, "pipeline", None)
    if not pipeline:
        raise HTTPException(status_code=500, detail="Service not initialized")
    return pipeline


def get_user_id(x_user_id: Annotated[str | None, Header()] = None) -> str:
    # Authentication happens upstream; the gateway forwards the user id.
    user_id = (x_user_id or "").strip()
    if not user_id:
        raise HTTPException(status_code=401, detail="Missing X-User-Id header")
    return user_id
