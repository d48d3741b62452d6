from __future__ import annotations

import os

# ---------------------------------------------------------------------------
# App identity
# ---------------------------------------------------------------------------

APP_NAME = "Психодіагностика"
APP_VERSION = "0.1.0"

# Root logging level for the entry point only. The scoring core reads no
# environment.
LOG_LEVEL = os.getenv("PSYCHODIAG_LOG_LEVEL", "INFO").strip().upper() or "INFO"

# ---------------------------------------------------------------------------
# CSV dialect
#
# The export is comma-separated with optional double quotes. Quotes toggle on
# every occurrence; there is no escaped-quote form.
# ---------------------------------------------------------------------------

CSV_DELIMITER = ","
CSV_QUOTE = '"'
CSV_ENCODING = "utf-8-sig"
CSV_EXTENSION = ".csv"

# ---------------------------------------------------------------------------
# Column layout (0-indexed)
#
#   0:       Timestamp
#   1:       Email
#   2:       Age
#   3-32:    САН                  (30 questions)
#   33-99:   Штепа                (67 questions)
#   100-135: Basic Ph             (36 questions)
#   136-148: Особистісні ресурси  (13 questions)
#   149-232: Ryff                 (84 questions)
# ---------------------------------------------------------------------------

METADATA_COLUMNS = 3

SAN_QUESTIONS = 30
SHTEPA_QUESTIONS = 67
BASIC_PH_QUESTIONS = 36
PERSONAL_RESOURCE_QUESTIONS = 13
RYFF_QUESTIONS = 84

SAN_OFFSET = METADATA_COLUMNS
SHTEPA_OFFSET = SAN_OFFSET + SAN_QUESTIONS
BASIC_PH_OFFSET = SHTEPA_OFFSET + SHTEPA_QUESTIONS
PERSONAL_RESOURCE_OFFSET = BASIC_PH_OFFSET + BASIC_PH_QUESTIONS
RYFF_OFFSET = PERSONAL_RESOURCE_OFFSET + PERSONAL_RESOURCE_QUESTIONS

MIN_COLUMNS = RYFF_OFFSET + RYFF_QUESTIONS  # 233

# ---------------------------------------------------------------------------
# Reporting
# ---------------------------------------------------------------------------

MEAN_PRECISION = 2

NO_DATA_ROWS_MESSAGE = "CSV file must have a header and at least one data row"
NO_VALID_ROWS_MESSAGE = "No valid data rows found in CSV"
