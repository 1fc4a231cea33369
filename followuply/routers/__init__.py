from .clients import router as clients_router
from .invoices import router as invoices_router
from .reminders import router as reminders_router
from .expenses import router as expenses_router
from .profile import router as profile_router
from .notifications import router as notifications_router
from .dashboard import router as dashboard_router
from .undo import router as undo_router
from .preferences import router as preferences_router
from .search import router as search_router
