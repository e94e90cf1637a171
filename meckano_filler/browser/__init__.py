from .document import PageDocument, PageElement
from .session import BrowserSession

__all__ = ['BrowserSession', 'PageDocument', 'PageElement']
