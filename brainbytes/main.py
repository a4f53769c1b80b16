import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from brainbytes.api.v1.messages import router as messages_router
from brainbytes.api.v1.users import router as users_router
from brainbytes.api.v1.materials import router as materials_router
from brainbytes.core.database import init_db
from brainbytes.services.chat.subjects import CLASSIFIER_VERSION

# System logging
logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')

app = FastAPI(title="BrainBytes Tutoring API", version="1.0.0")

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routers
app.include_router(messages_router, prefix="/api")
app.include_router(users_router, prefix="/api")
app.include_router(materials_router, prefix="/api")

@app.on_event("startup")
async def startup_event():
    """Create the tables when the application starts."""
    logging.info("Initializing database...")
    await init_db()
    logging.info(f"BrainBytes API ready (subject classifier v{CLASSIFIER_VERSION})")

@app.get("/")
async def root():
    return {"message": "Welcome to the BrainBytes API"}

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=3000)
