import csv
import io
import logging
from typing import List, Tuple

from pydantic import ValidationError

from schemas import SourceDataCreate

logger = logging.getLogger(__name__)

COL_NUMBER = "번호"
COL_LARGE = "대분류"
COL_MEDIUM = "중분류"
COL_SMALL = "소분류"
COL_CORE = "핵심 키워드"
COL_SEO = "SEO 키워드"
COL_TOPIC = "블로그 콘텐츠 주제"

# 소분류 and SEO 키워드 may be absent; their cells default to empty
REQUIRED_COLUMNS = [COL_NUMBER, COL_LARGE, COL_MEDIUM, COL_CORE, COL_TOPIC]


class CSVImportError(ValueError):
    pass


def _int_or_zero(value: str) -> int:
    try:
        return int((value or "").strip())
    except ValueError:
        return 0


def _cell(row: dict, col: str) -> str:
    return (row.get(col) or "").strip()


def parse_source_data_csv(data: bytes) -> Tuple[List[SourceDataCreate], int]:
    """
    Returns (valid rows, total data rows). Rows without a positive number or
    without 대분류/중분류/핵심 키워드/블로그 콘텐츠 주제 are skipped without notice.
    """
    try:
        text = data.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise CSVImportError("CSV file must be UTF-8 encoded") from e

    reader = csv.DictReader(io.StringIO(text, newline=""))
    headers = [h.strip() for h in (reader.fieldnames or [])]
    missing = [c for c in REQUIRED_COLUMNS if c not in headers]
    if missing:
        raise CSVImportError(f"CSV header is missing columns: {', '.join(missing)}")
    reader.fieldnames = headers

    valid: List[SourceDataCreate] = []
    total = 0
    try:
        for row in reader:
            if not any((v or "").strip() for v in row.values() if isinstance(v, str)):
                continue  # blank line
            total += 1
            seo = _cell(row, COL_SEO)
            try:
                item = SourceDataCreate(
                    number=_int_or_zero(_cell(row, COL_NUMBER)),
                    category_large=_cell(row, COL_LARGE),
                    category_medium=_cell(row, COL_MEDIUM),
                    category_small=_cell(row, COL_SMALL) or None,
                    core_keyword=_cell(row, COL_CORE),
                    seo_keywords=[k.strip() for k in seo.split(",") if k.strip()] if seo else [],
                    blog_topic=_cell(row, COL_TOPIC),
                )
            except ValidationError:
                continue
            valid.append(item)
    except csv.Error as e:
        raise CSVImportError(f"CSV parsing error: {e}") from e

    logger.info("[csv] %d/%d rows valid", len(valid), total)
    return valid, total
