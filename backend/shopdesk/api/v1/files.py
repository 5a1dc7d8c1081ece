"""Attachment downloads."""

from __future__ import annotations

from flask import Blueprint, send_file

from shopdesk.api.deps import require_auth, services, timing
from shopdesk.services._shared.ports.token_codec import Principal

bp = Blueprint("files", __name__)


@bp.get("/shops/<int:shop_id>/<int:file_id>")
@require_auth
@timing
def download(shop_id: int, file_id: int, principal: Principal):
    """Stream an attachment with its original name."""

    found = services().files.open_file(shop_id, file_id)
    return send_file(
        found.path,
        mimetype=found.content_type or None,
        as_attachment=True,
        download_name=found.download_name,
    )
