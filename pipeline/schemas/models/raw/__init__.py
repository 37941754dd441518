"""Raw spreadsheet row models — cells in, normalized fields out."""

from models.raw.planilha_raw import *  # noqa: F401, F403
