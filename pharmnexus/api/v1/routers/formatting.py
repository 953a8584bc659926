from fastapi import APIRouter

from ....schemas.text_schemas import RenderIn, RenderOut, block_out
from ....services.renderer import render

router = APIRouter(prefix="/format", tags=["format"])

@router.post("/render", response_model=RenderOut)
async def render_text(payload: RenderIn):
    return RenderOut(blocks=[block_out(b) for b in render(payload.text)])
