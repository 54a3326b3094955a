from fastapi import APIRouter, Request

router = APIRouter(tags=["health"])

@router.get("/health")
def health(request: Request):
    return {"status": "ok", "sessions": len(request.app.state.vector_store)}
