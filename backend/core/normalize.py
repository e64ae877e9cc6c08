import re, yaml, pathlib



ROOT = pathlib.Path(__file__).resolve().parents[2]

DICT = yaml.safe_load((ROOT / "shared/dictionaries/normalization.yaml").read_text(encoding="utf-8"))

_WARMUP = re.compile(r"^\s*(?:" + "|".join(DICT["warmup_markers"]) + r")\s*")

_QUALIFIERS = [re.compile(rf"\b{p}\b") for p in DICT["qualifiers"]]

_EQUIPMENT = [re.compile(rf"\b{re.escape(w)}\b") for w in DICT["equipment_words"]]



def normalize(text: str, strip_qualifiers: bool = True) -> str:
    """
    Normalize a free-text exercise name for matching.

    Lowercases, folds "ё", drops a leading warm-up marker, expands
    abbreviations, removes punctuation and singularizes common plurals.
    With strip_qualifiers, equipment/location qualifiers ("with barbell",
    "on machine", "со штангой", bare equipment words) are removed as well.
    """

    t = (text or "").lower()

    for k, v in DICT["fold"].items():

        t = t.replace(k, v)

    t = _WARMUP.sub("", t)

    t = re.sub(r"[-_/]", " ", t)

    t = re.sub(r"[^\w\s]", " ", t)

    for k, v in DICT["expand"].items():

        t = re.sub(rf"\b{k}\b", v, t)

    if strip_qualifiers:

        for pattern in _QUALIFIERS + _EQUIPMENT:

            t = pattern.sub(" ", t)

    words = [DICT["plural_to_singular"].get(w, w) for w in t.split()]

    return " ".join(words).strip()
