from typing import Annotated

from fastapi import APIRouter, Depends

from voice_ledger.api.dependencies import get_pipeline, get_user_id
from voice_ledger.api.schemas import VoiceTransactionRequest
from voice_ledger.models import CommitResult, ConfirmationResult
from voice_ledger.services.voice import VoiceTransactionPipeline

router = APIRouter()


@router.post(
    "/api/transactions/voice",
    response_model=CommitResult | ConfirmationResult,
)
async def create_voice_transaction(
    req: VoiceTransactionRequest,
    pipeline: Annotated[VoiceTransactionPipeline, Depends(get_pipeline)],
    user_id: Annotated[str, Depends(get_user_id)],
) -> CommitResult | ConfirmationResult:
    return await pipeline.parse_and_create(req.text, user_id)
