# etl/load_recipes_mongo.py
import json, re, ast, logging, pandas as pd
from dotenv import load_dotenv; load_dotenv()
from pymongo import UpdateOne
from recipe_book.db_mongo import get_db, ensure_indexes
from recipe_book.errors import InvalidInputError
from recipe_book.models import validate_recipe_payload
from recipe_book.utils.normalization import normalize_token

logger = logging.getLogger(__name__)

def parse_list_cell(val):
    if val is None: return []
    if isinstance(val, list): return [str(x) for x in val]
    if isinstance(val, float) and pd.isna(val): return []
    s = str(val).strip()
    if not s: return []
    if s.startswith("[") and s.endswith("]"):
        for parser in (json.loads, ast.literal_eval):
            try:
                arr = parser(s)
                if isinstance(arr, list): return [str(x) for x in arr]
            except Exception:
                pass
    return [p.strip() for p in re.split(r"[;,]", s) if p.strip()]

def parse_steps_cell(val):
    if val is None: return []
    if isinstance(val, list): return [clean_display(x) for x in val if str(x).strip()]
    s = str(val).strip()
    if not s: return []
    if s.startswith("[") and s.endswith("]"):
        for parser in (json.loads, ast.literal_eval):
            try:
                arr = parser(s)
                if isinstance(arr, list):
                    return [clean_display(x) for x in arr if str(x).strip()]
            except Exception:
                pass
    lines = [l.strip() for l in re.split(r"\r?\n+", s) if l.strip()]
    if len(lines) > 1:
        return [re.sub(r"^\s*(\d+[\)\.\:\-]\s*|[-•]\s*)", "", l) for l in lines]
    parts = [p.strip() for p in re.split(r"\s*[;|]\s*", s) if p.strip()]
    if len(parts) > 1:
        return [re.sub(r"^\s*(\d+[\)\.\:\-]\s*|[-•]\s*)", "", p) for p in parts]
    return [s]

def clean_display(text: str) -> str:
    t = str(text).strip().strip("[]\"'")
    return re.sub(r"\s+", " ", t)

def parse_minutes(val):
    """Return minutes as int, or None. Handles: 55, 'minutes 55', '55 minutes', '1 hr 30 min', 'PT45M', '1:30'."""
    if val is None:
        return None
    if isinstance(val, (int, float)) and not pd.isna(val):
        return int(val)

    s = str(val).strip().lower()
    if not s:
        return None

    m = re.match(r"^pt(?:(\d+)h)?(?:(\d+)m)?(?:(\d+)s)?$", s)
    if m:
        h = int(m.group(1) or 0)
        mi = int(m.group(2) or 0)
        sec = int(m.group(3) or 0)
        return h * 60 + mi + (1 if (h == 0 and mi == 0 and sec > 0) else 0)

    hours = re.search(r"(\d+)\s*(h|hr|hour|hours)", s)
    mins  = re.search(r"(\d+)\s*(m|min|mins|minute|minutes)", s)
    total = 0
    if hours: total += int(hours.group(1)) * 60
    if mins:  total += int(mins.group(1))
    if total > 0: return total

    m = re.match(r"^\s*(\d+)\s*:\s*(\d{1,2})\s*$", s)
    if m: return int(m.group(1)) * 60 + int(m.group(2))

    nums = re.findall(r"\d+", s)  # covers 'minutes 55'
    return int(nums[-1]) if nums else None

UNITS = {"g", "kg", "mg", "ml", "l", "tsp", "tbsp", "cup", "cups", "oz", "lb", "lbs", "pinch", "clove", "cloves"}

def parse_ingredient(text: str) -> dict:
    """'200 g bacon' -> {name: 'bacon', quantity: '200', unit: 'g'}; anything else is just a name."""
    t = clean_display(text)
    parts = t.split()
    if len(parts) >= 2 and re.match(r"^\d+(?:[./]\d+)?$", parts[0]):
        qty, rest = parts[0], parts[1:]
        unit = ""
        if len(rest) >= 2 and rest[0].lower() in UNITS:
            unit, rest = rest[0].lower(), rest[1:]
        return {"name": normalize_token(" ".join(rest)), "quantity": qty, "unit": unit}
    return {"name": normalize_token(t), "quantity": "", "unit": ""}

def parse_count(val):
    if val is None: return None
    if isinstance(val, (int, float)) and not pd.isna(val): return int(val)
    nums = re.findall(r"\d+", str(val))
    return int(nums[0]) if nums else None

def detect_columns(df: pd.DataFrame):
    cols = {c.lower().strip(): c for c in df.columns}
    def col_like(*names):
        for n in names:
            if n in cols: return cols[n]
        for k, orig in cols.items():
            for n in names:
                if n in k: return orig
        return None
    return dict(
        name=col_like("name","title","recipe"),
        cuisine=col_like("cuisine","region"),
        prep=col_like("preptime","prep_time","prep"),
        cook=col_like("cooktime","cook_time","cook"),
        servings=col_like("servings","serves","yield"),
        ingredients=col_like("ingredients","ingredient_list","ings"),
        tags=col_like("tags","labels","categories"),
        steps=col_like("instructions","steps","directions","method","procedure"),
    )

def read_table(path: str) -> pd.DataFrame:
    if str(path).lower().endswith(".csv"):
        return pd.read_csv(path)
    return pd.read_excel(path)

def _cell(row, col):
    if not col: return None
    v = row[col]
    if isinstance(v, float) and pd.isna(v): return None
    return v

def upsert_reference(db, collection: str, names):
    """Make sure every name has a reference document; returns {name: doc}."""
    names = sorted({n for n in names if n})
    if names:
        db[collection].bulk_write(
            [UpdateOne({"name": n}, {"$setOnInsert": {"name": n}}, upsert=True) for n in names],
            ordered=False,
        )
    return {d["name"]: d for d in db[collection].find({"name": {"$in": names}})}

def load_recipes_to_mongo(path: str, drop_existing: bool = True, db=None):
    db = db if db is not None else get_db()
    if drop_existing:
        db.recipes.drop()  # keep cuisines, tags and users intact

    df = read_table(path)
    cols = detect_columns(df)

    rows = []
    skipped = 0
    for i, row in df.iterrows():
        name = clean_display(_cell(row, cols["name"])) if _cell(row, cols["name"]) is not None else f"Recipe {i+1}"
        cuisine = clean_display(_cell(row, cols["cuisine"])).title() if _cell(row, cols["cuisine"]) is not None else None
        tags = [normalize_token(t) for t in parse_list_cell(_cell(row, cols["tags"]))]
        r = dict(
            name=name,
            cuisine=cuisine,
            prepTime=parse_minutes(_cell(row, cols["prep"])),
            cookTime=parse_minutes(_cell(row, cols["cook"])),
            servings=parse_count(_cell(row, cols["servings"])),
            ingredients=[parse_ingredient(x) for x in parse_list_cell(_cell(row, cols["ingredients"]))],
            instructions=parse_steps_cell(_cell(row, cols["steps"])),
            tags=sorted({t for t in tags if t}),
        )
        try:
            validate_recipe_payload(r)
        except InvalidInputError as e:
            logger.warning("skipping row %d (%s): %s", i + 1, name, e.message)
            skipped += 1
            continue
        rows.append(r)

    cuisines = upsert_reference(db, "cuisines", [r["cuisine"] for r in rows])
    tags = upsert_reference(db, "tags", [t for r in rows for t in r["tags"]])

    docs = []
    for r in rows:
        r["cuisine"] = cuisines[r["cuisine"]]
        r["tags"] = [tags[t] for t in r["tags"]]
        docs.append(r)

    if docs:
        db.recipes.insert_many(docs, ordered=False)

    ensure_indexes(db)
    summary = {
        "recipes_inserted": len(docs),
        "recipes_skipped": skipped,
        "cuisines": len(cuisines),
        "tags": len(tags),
    }
    logger.info("loaded %s: %s", path, summary)
    return summary

if __name__ == "__main__":
    import sys
    logging.basicConfig(level=logging.INFO)
    p = sys.argv[1] if len(sys.argv) > 1 else "recipes.xlsx"
    print(load_recipes_to_mongo(p))
