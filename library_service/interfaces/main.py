from ..infrastructure.app_factory import create_application
from ..infrastructure.config.settings import get_settings
from ..interfaces.api import router as api_router
from ..modules.common.utils.error_handler import register_exception_handlers

settings = get_settings()

app = create_application(
    router=api_router,
    settings=settings,
    title="Library Lending API",
    summary="REST API for a library's books, borrowers and loans",
    description="""
    # Library Lending API

    * 📚 **Books**: CRUD, name-prefix search, paging sorted by year
    * 🧑 **People**: the borrowers, with the books they currently hold
    * 🔁 **Lending**: lend a book to a person and take it back

    A book is either on the shelf or lent to exactly one person. Books held
    longer than the loan period are flagged as `expired`.
    """,
    version=settings.VERSION,
)

register_exception_handlers(app)
