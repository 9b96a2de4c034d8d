# main.py
import io
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

import pandas as pd
from fastapi import Depends, FastAPI, File, HTTPException, Request, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, StreamingResponse

from config import get_settings
from intent import IntentClassifier
from models import Lead, Offer
from scoring import PreconditionError, run_scoring
from storage import InMemoryStore, LeadStore, SQLiteStore

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

LEAD_COLUMNS = ["name", "role", "company", "industry", "location", "linkedin_bio"]
EXPORT_COLUMNS = ["name", "role", "company", "industry", "location", "intent", "score", "reasoning"]


def open_store() -> LeadStore:
    path = get_settings().database_path
    if path:
        return SQLiteStore(path)
    logger.info("DATABASE_PATH not set, keeping leads and results in memory")
    return InMemoryStore()


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    app.state.store = open_store()
    app.state.classifier = IntentClassifier()
    logger.info("Lead Scoring API started, AI model: %s", settings.openai_model)
    yield
    app.state.store.close()
    logger.info("Lead Scoring API shutting down")


app = FastAPI(title="Lead Scoring API", version="0.2", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type"],
)


def get_store(request: Request) -> LeadStore:
    return request.app.state.store


def get_classifier(request: Request) -> IntentClassifier:
    return request.app.state.classifier


@app.get("/")
async def root():
    return {"message": "Lead Scoring API is running! Visit /docs for interactive API docs."}

@app.get("/health")
async def health():
    return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}

@app.post("/offer")
def post_offer(offer: Offer, store: LeadStore = Depends(get_store)):
    saved = store.add_offer(Offer(name=offer.name, value_props=offer.value_props, ideal_use_cases=offer.ideal_use_cases))
    return saved.model_dump(mode="json")

@app.post("/leads/upload")
def upload_leads(file: UploadFile = File(...), store: LeadStore = Depends(get_store)):
    if not file.filename or not file.filename.lower().endswith((".csv", ".txt")):
        raise HTTPException(status_code=400, detail="Only CSV files supported.")
    contents = file.file.read()
    try:
        df = pd.read_csv(io.BytesIO(contents), dtype=str, keep_default_na=False)
    except pd.errors.EmptyDataError:
        # nothing to import, not even a header row
        df = pd.DataFrame(columns=LEAD_COLUMNS)
    except Exception as e:
        raise HTTPException(status_code=400, detail=f"Could not parse CSV: {e}")

    # Allow case-insensitive columns by normalizing
    df.columns = [str(c).strip().lower() for c in df.columns]
    for c in LEAD_COLUMNS:
        if c not in df.columns:
            df[c] = ""

    leads = []
    for _, row in df.iterrows():
        leads.append(Lead(**{c: str(row[c]).strip() for c in LEAD_COLUMNS}))
    imported = store.add_leads(leads)
    logger.info("Imported %d leads from %s", imported, file.filename)
    return {"status": "ok", "imported": imported}

@app.post("/score")
def score(store: LeadStore = Depends(get_store), classifier: IntentClassifier = Depends(get_classifier)):
    try:
        run = run_scoring(store, classifier)
    except PreconditionError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"message": "Scoring completed", **run.model_dump()}

@app.get("/results")
def get_results(store: LeadStore = Depends(get_store)):
    rows = store.list_results_joined()
    return JSONResponse([
        r.model_dump(mode="json", include={"id", "name", "role", "company", "intent", "score", "reasoning", "created_at"})
        for r in rows
    ])

@app.get("/results/export")
def export_csv(store: LeadStore = Depends(get_store)):
    rows = store.list_results_joined()
    if not rows:
        return JSONResponse({"detail": "No results yet."}, status_code=404)
    df = pd.DataFrame([r.model_dump() for r in rows], columns=EXPORT_COLUMNS)
    stream = io.StringIO()
    df.to_csv(stream, index=False)
    stream.seek(0)
    return StreamingResponse(io.BytesIO(stream.getvalue().encode()), media_type="text/csv", headers={"Content-Disposition": "attachment; filename=lead_scores.csv"})


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=get_settings().port)
