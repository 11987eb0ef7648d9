"""Load a medicine catalog file into the SQL store.

Accepts a JSON array or JSON-lines file of {id?, name, type, price} records.
Names and types are cleaned, missing ids get UUIDs, and duplicate ids keep
their first occurrence. Run:
    uv run python scripts/seed_medicines.py

Environment:
    DATABASE_URL (default sqlite:///./medicines.db)
"""

import logging
import sys
from pathlib import Path
from typing import Any, Dict, List

CURRENT_DIR = Path(__file__).resolve().parent
ROOT_DIR = CURRENT_DIR.parent
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from src.store.data_store import SqlMedicineStore  # noqa: E402
from src.store.memory_store import read_records  # noqa: E402
from src.store.schemas import Medicine  # noqa: E402
from src.utils.text_cleaning import clean_text  # noqa: E402

# --- Configuration ---
INPUT_FILE = "medicines.jsonl"
RESET_TABLE = False
BATCH_SIZE = 500
# --- End of Configuration ---

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)


def clean_records(records: List[Dict[str, Any]]) -> List[Medicine]:
    seen_ids = set()
    medicines: List[Medicine] = []
    dupe_count = 0
    for i, record in enumerate(records, start=1):
        cleaned = dict(record)
        cleaned["name"] = clean_text(record.get("name"))
        cleaned["type"] = clean_text(record.get("type"))
        try:
            medicine = Medicine.from_record(cleaned)
        except (TypeError, ValueError) as e:
            logging.warning(f"   Skipping record {i}: {e}")
            continue
        if medicine.id in seen_ids:
            dupe_count += 1
            continue
        seen_ids.add(medicine.id)
        medicines.append(medicine)

    logging.info(f"Duplicates found:    {dupe_count:,}")
    return medicines


def main() -> int:
    path = Path(INPUT_FILE)
    logging.info(f"Input file: {path}")
    try:
        records = read_records(path)
    except FileNotFoundError:
        logging.error(f"Error: Input file not found: {path}")
        return 1
    except ValueError as e:
        logging.error(f"Error: {e}")
        return 1

    medicines = clean_records(records)

    store = SqlMedicineStore()
    if RESET_TABLE:
        store.reset()

    for start in range(0, len(medicines), BATCH_SIZE):
        store.upsert(medicines[start : start + BATCH_SIZE])
        logging.info(f"   Upserted {min(start + BATCH_SIZE, len(medicines)):,} medicines...")

    logging.info("---")
    logging.info(f"Total records read:    {len(records):,}")
    logging.info(f"Medicines saved:       {len(medicines):,}")
    logging.info(f"Medicines in store:    {store.count():,}")
    logging.info("---")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
