from fastapi import APIRouter, Depends

from spotix_api.api.deps import get_gemini
from spotix_api.api.health import health_payload
from spotix_api.core.errors import BadRequest
from spotix_api.schemas.enhance import EnhanceBody, EnhanceOut
from spotix_api.services.enhancer import GeminiClient, build_prompt

router = APIRouter()

@router.post("", response_model=EnhanceOut)
async def enhance_description(payload: EnhanceBody, gemini: GeminiClient = Depends(get_gemini)):
    """Rewrite an organiser's event description with the generative model."""
    if not all([payload.eventName, payload.eventDescription, payload.eventDate, payload.eventVenue, payload.eventType]):
        raise BadRequest("Missing required event details")
    prompt = build_prompt(payload.eventName, payload.eventDescription, payload.eventDate, payload.eventVenue, payload.eventType)
    text = await gemini.generate(prompt)
    return {"enhancedDescription": text}

@router.get("/health")
def enhance_health():
    return health_payload("Event Description Enhancer")
