"""Idempotent style sheet injection"""

from host.document import Document
from models.effect_descriptor import EffectDescriptor
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.STYLE)


class StyleInjector:
    """Injects each effect's minimal CSS once per document"""

    def __init__(self, document: Document):
        self.document = document

    def ensure(self, sheet_id: str, css: str) -> bool:
        if not css:
            return False
        injected = self.document.ensure_style_sheet(sheet_id, css)
        if injected:
            log.info("Styles injected", id=sheet_id)
        return injected

    def ensure_for(self, descriptor: EffectDescriptor) -> bool:
        return self.ensure(descriptor.sheet_id, descriptor.css)
