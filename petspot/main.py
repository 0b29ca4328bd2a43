from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from petspot.api.errors import ApiError, api_error_handler
from petspot.api.routes import router
from petspot.settings import settings

app = FastAPI(title="PetSpot Announcements API")

origins = [x.strip() for x in settings.CORS_ORIGINS.split(",") if x.strip()]
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_exception_handler(ApiError, api_error_handler)
app.include_router(router)

# Uploaded photos are served back under the photoUrl stored on the announcement
app.mount("/images", StaticFiles(directory=settings.UPLOAD_DIR, check_dir=False), name="images")


@app.get("/health")
def health():
    return {"status": "ok"}
