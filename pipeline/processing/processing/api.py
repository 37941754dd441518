"""HTTP surface: spreadsheet import/update uploads plus template, export and
fee summary downloads. Every route except ``/health`` needs a Bearer token."""

from __future__ import annotations

import logging
import uuid
from datetime import date
from typing import Optional

from fastapi import Depends, FastAPI, File, Form, Header, Request, UploadFile
from fastapi.responses import JSONResponse, Response

from processing.auth import verify_token
from processing.config import Settings
from processing.exceptions import NaoAutenticadoError, PlanilhaInvalidaError
from processing.exporters import build_update_template, export_pericias
from processing.loaders.store import PericiaStore
from processing.pipeline import DEFAULT_VARIANT, atualizar_planilha, importar_planilha
from processing.reports import resumo_honorarios

logger = logging.getLogger(__name__)

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def _xlsx(content: bytes, filename: str) -> Response:
    return Response(
        content=content,
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


def _read_upload(file: Optional[UploadFile]) -> bytes:
    if file is None:
        raise PlanilhaInvalidaError("Nenhum arquivo enviado")
    return file.file.read()


def create_app(settings: Optional[Settings] = None, store: Optional[PericiaStore] = None) -> FastAPI:
    """Build the application around one settings object and one store."""
    settings = settings or Settings.from_env()
    store = store or PericiaStore.from_url(settings.database_url)

    app = FastAPI(title="Perícias Planilhas")
    app.state.settings = settings
    app.state.store = store

    def current_user(authorization: Optional[str] = Header(default=None)) -> uuid.UUID:
        token = None
        if authorization and authorization.lower().startswith("bearer "):
            token = authorization[7:].strip()
        user_id = verify_token(token, settings.secret_key)
        if user_id is None:
            raise NaoAutenticadoError()
        return user_id

    @app.exception_handler(NaoAutenticadoError)
    async def _unauthenticated(request: Request, exc: NaoAutenticadoError) -> JSONResponse:
        return JSONResponse(status_code=401, content={"error": str(exc)})

    @app.exception_handler(PlanilhaInvalidaError)
    async def _bad_workbook(request: Request, exc: PlanilhaInvalidaError) -> JSONResponse:
        logger.info("Rejected upload on %s: %s", request.url.path, exc)
        return JSONResponse(status_code=400, content={"error": str(exc)})

    @app.exception_handler(ValueError)
    async def _bad_request(request: Request, exc: ValueError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"error": str(exc)})

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.post("/import-excel")
    def import_excel(
        file: Optional[UploadFile] = File(default=None),
        variante: str = Form(default=DEFAULT_VARIANT),
        user_id: uuid.UUID = Depends(current_user),
    ) -> dict:
        result = importar_planilha(
            _read_upload(file), user_id, store, variante=variante, settings=settings
        )
        return result.to_payload()

    @app.post("/update-pericias-excel")
    def update_pericias_excel(
        file: Optional[UploadFile] = File(default=None),
        user_id: uuid.UUID = Depends(current_user),
    ) -> dict:
        return atualizar_planilha(_read_upload(file), user_id, store).to_payload()

    @app.get("/update-template")
    def update_template(user_id: uuid.UUID = Depends(current_user)) -> Response:
        return _xlsx(build_update_template(), "template_atualizacao_pericias.xlsx")

    @app.get("/export")
    def export(user_id: uuid.UUID = Depends(current_user)) -> Response:
        content = export_pericias(store.list_for_user(user_id))
        return _xlsx(content, f"pericias_{date.today().isoformat()}.xlsx")

    @app.get("/resumo")
    def resumo(user_id: uuid.UUID = Depends(current_user)) -> dict:
        return resumo_honorarios(store.list_for_user(user_id)).to_payload()

    return app
