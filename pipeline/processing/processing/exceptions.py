"""Fatal precondition errors — raised before any spreadsheet row is processed."""

from __future__ import annotations


class PipelineError(Exception):
    """Base class for errors that abort a whole import/update batch."""


class NaoAutenticadoError(PipelineError):
    """No owning user was supplied (missing or invalid credential)."""

    def __init__(self, message: str = "Não autenticado") -> None:
        super().__init__(message)


class PlanilhaInvalidaError(PipelineError):
    """The uploaded file is missing, empty, or not a readable workbook."""
