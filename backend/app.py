"""
Halal Scan FastAPI application.

Endpoints:
    GET  /                    Health check
    GET  /products/{barcode}  Catalog lookup
    POST /classify            Ingredient list -> forbidden / ambiguous findings
    POST /scan/barcode        Catalog + classifier, advisor when credentialed
    POST /scan/text           Free-text product description (advisor required)
    POST /scan/image          Product photo (advisor required)
"""
from fastapi import FastAPI, File, Form, Header, HTTPException, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel
from typing import List, Literal, Optional
import logging
import threading
from dotenv import load_dotenv
from pathlib import Path

# Load env vars
load_dotenv(Path(__file__).parent / ".env")

# Logger
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Initialize App
app = FastAPI(title="Halal Scan API")

from halalscan.config import log_config, get_gemini_api_key
log_config()

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

from halalscan.catalog.product_catalog import ProductCatalog
from halalscan.errors import InvalidRequest
from halalscan.evaluation.classifier import classify_ingredients
from halalscan.external_apis import GeminiAdvisor
from halalscan.scan_resolver import ScanResolver
from halalscan.taxonomy import IngredientTaxonomy

taxonomy = IngredientTaxonomy()
catalog = ProductCatalog(taxonomy=taxonomy)
resolver = ScanResolver(
    catalog=catalog,
    taxonomy=taxonomy,
    advisor=GeminiAdvisor(),
    fallback_credential=get_gemini_api_key(),
)


# --- Startup ---
@app.on_event("startup")
def _warmup_catalog():
    """Load the product catalog in the background so the first scan is fast."""

    def _load():
        count = len(catalog)
        logger.info("WARMUP catalog ready count=%d", count)

    threading.Thread(target=_load, daemon=True).start()


# --- Request Models ---
Language = Literal["en", "ru", "ar"]


class ClassifyRequest(BaseModel):
    ingredients: List[str]


class BarcodeScanRequest(BaseModel):
    barcode: str
    credential: Optional[str] = None
    language: Language = "ru"
    enrich: bool = False
    model: Optional[str] = None


class TextScanRequest(BaseModel):
    text: str
    credential: Optional[str] = None
    language: Language = "ru"
    model: Optional[str] = None


def _pick_credential(body_value: Optional[str], header_value: Optional[str]) -> Optional[str]:
    return (body_value or "").strip() or (header_value or "").strip() or None


# --- Endpoints ---

@app.get("/")
def health_check():
    return {
        "status": "ok",
        "service": "Halal Scan",
        "catalog_loaded": catalog.loaded,
        "taxonomy_version": taxonomy.get_version(),
    }


@app.get("/products/{barcode}")
def get_product(barcode: str):
    product = catalog.lookup(barcode)
    if product is None:
        raise HTTPException(status_code=404, detail="Product not found")
    return product.to_dict()


@app.post("/classify")
def classify(request: ClassifyRequest):
    return classify_ingredients(request.ingredients, taxonomy).to_dict()


@app.post("/scan/barcode")
def scan_barcode(
    request: BarcodeScanRequest,
    x_gemini_api_key: Optional[str] = Header(default=None),
):
    try:
        outcome = resolver.scan_by_barcode(
            request.barcode,
            credential=_pick_credential(request.credential, x_gemini_api_key),
            language=request.language,
            enrich=request.enrich,
            model=request.model,
        )
    except InvalidRequest as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error("Barcode scan failed: %s", e, exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))
    return outcome.to_dict()


@app.post("/scan/text")
def scan_text(
    request: TextScanRequest,
    x_gemini_api_key: Optional[str] = Header(default=None),
):
    try:
        outcome = resolver.scan_by_text(
            request.text,
            credential=_pick_credential(request.credential, x_gemini_api_key),
            language=request.language,
            model=request.model,
        )
    except InvalidRequest as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error("Text scan failed: %s", e, exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))
    return outcome.to_dict()


@app.post("/scan/image")
def scan_image(
    file: UploadFile = File(...),
    language: Language = Form("ru"),
    credential: Optional[str] = Form(None),
    barcode: Optional[str] = Form(None),
    model: Optional[str] = Form(None),
    x_gemini_api_key: Optional[str] = Header(default=None),
):
    """Photo of a product or its label; recognition is done by the advisor."""
    logger.info("Image scan request filename=%s content_type=%s", file.filename, file.content_type)
    try:
        # one byte past the limit marks an oversized upload
        image_bytes = file.file.read(resolver.max_image_bytes + 1)
        outcome = resolver.scan_by_image(
            image_bytes,
            file.content_type or "",
            credential=_pick_credential(credential, x_gemini_api_key),
            language=language,
            model=model,
            barcode=barcode,
        )
    except InvalidRequest as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error("Image scan failed: %s", e, exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))
    return outcome.to_dict()
