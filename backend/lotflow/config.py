import os
from pathlib import Path
from dotenv import load_dotenv

_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent

# Load .env from project root (one level above backend/)
load_dotenv(_PROJECT_ROOT / ".env")

LOT_DATA_PATH = Path(os.getenv("LOT_DATA_PATH", str(_PROJECT_ROOT / "data" / "lines_of_therapy.csv")))
LOT_SUPABASE_TABLE = os.getenv("LOT_SUPABASE_TABLE", "lines_of_therapy")
SUPABASE_URL = os.getenv("SUPABASE_URL", "")
SUPABASE_ANON_KEY = os.getenv("SUPABASE_ANON_KEY", "")
ALLOWED_ORIGINS = [
    o.strip() for o in os.getenv("ALLOWED_ORIGINS", "http://localhost:5173").split(",") if o.strip()
]
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
