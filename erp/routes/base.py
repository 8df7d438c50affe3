from fastapi import APIRouter

router = APIRouter()

@router.get("/health")
def health():
    return {"success": True, "status": "ok"}

@router.get("/version")
def version():
    return {"success": True, "app": "erp-api", "version": "0.1.0"}
