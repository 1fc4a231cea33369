from .database import (
    Base, engine, SessionLocal, create_db_engine, init_db,
    Profile as ProfileModel, Client as ClientModel, Invoice as InvoiceModel,
    Reminder as ReminderModel, Expense as ExpenseModel, Notification as NotificationModel
)
from .schemas import (
    ValidationResult, Toast,
    ClientCreate, ClientUpdate, ClientRecord,
    InvoiceCreate, InvoiceUpdate, InvoiceRecord, MarkPaidRequest,
    ReminderCreate, ReminderUpdate, ReminderRecord,
    ExpenseCreate, ExpenseUpdate, ExpenseRecord, CategoryTotal, ClientTotal, MonthlyTotal,
    ProfileUpdate, ProfileRecord,
    NotificationCreate, NotificationRecord,
    DashboardStats, InvoicesPage, SearchResult, PreferencesUpdate
)
