from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from clipcore.api.routes.chapters import router as chapters_router
from clipcore.api.routes.content import router as content_router
from clipcore.api.routes.windows import router as windows_router
from clipcore.config import settings

app = FastAPI(
    title="clipcore API",
    description="Highlight windows, transcript-grounded chapters and video metadata",
    version="0.1.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:3000",
    ],
    allow_origin_regex=r"http://localhost:\d+",
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(windows_router)
app.include_router(chapters_router)
app.include_router(content_router)


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("clipcore.api.main:app", host=settings.api_host, port=settings.api_port)
