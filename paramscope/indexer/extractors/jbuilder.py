"""Jbuilder view extractor - response fields per controller action."""

from typing import Any

from paramscope.ast_extractors import jbuilder_impl
from paramscope.graph.types import View
from paramscope.indexer.config import JBUILDER_EXTENSIONS
from paramscope.utils.logging import logger

from . import BaseExtractor


class JbuilderExtractor(BaseExtractor):
    """Extractor for `.json.jbuilder` templates."""

    def supported_extensions(self) -> list[str]:
        return list(JBUILDER_EXTENSIONS)

    def extract(self, file_info: dict[str, Any], tree: Any) -> dict[str, Any]:
        key = jbuilder_impl.view_key(file_info["relative_to_base"])
        if key is None:
            logger.debug(f"Skipping non-endpoint template {file_info['path']}")
            return {"view": None}

        controller, action = key
        fields = jbuilder_impl.extract_response_fields(tree)
        logger.debug(f"Extracted view {controller}#{action} -> {len(fields)} fields")
        return {"view": View(controller=controller, action=action, fields=fields)}
