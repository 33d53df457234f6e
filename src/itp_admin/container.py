from __future__ import annotations

from dataclasses import dataclass

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .bug_reports.mysql_bug_report_repository import MySQLBugReportRepository
from .bug_reports.repository import BugReportRepository
from .bug_reports.service import BugReportService
from .calendar.mysql_calendar_repository import MySQLCalendarRepository
from .calendar.repository import CalendarRepository
from .calendar.service import CalendarService
from .dashboard.service import DashboardService
from .database.connection import DBConfig, DatabaseConnection
from .documents.mysql_document_repository import MySQLDocumentRepository
from .documents.repository import DocumentRepository
from .documents.service import DocumentService
from .grocery.mysql_grocery_repository import MySQLGroceryOrderRepository
from .grocery.repository import GroceryOrderRepository
from .grocery.service import GroceryService
from .housing.mysql_housing_repository import MySQLHousingRepository
from .housing.repository import HousingRepository
from .housing.service import RoomAllocationService
from .medical.mysql_medical_repository import MySQLMedicalRepository
from .medical.repository import MedicalRepository
from .medical.service import MedicalService
from .operations.mysql_wellpass_repository import MySQLWellPassRepository
from .operations.repository import WellPassRepository
from .operations.service import OperationsService
from .pickups.mysql_pickup_repository import MySQLPickupRepository
from .pickups.repository import PickupRepository
from .pickups.service import PickupService
from .players.mysql_player_repository import MySQLPlayerRepository
from .players.repository import PlayerRepository
from .players.service import PlayerService
from .players.whereabouts import WhereaboutsService
from .prospects.conversion import ProspectConversionService
from .prospects.mysql_prospect_repository import MySQLProspectRepository
from .prospects.repository import ProspectRepository
from .prospects.service import ProspectService
from .staff.mysql_account_repository import MySQLAccountRepository
from .staff.repository import AccountRepository
from .staff.invites import StaffInviteService
from .staff.service import AuthService, StaffService
from .storage.bucket import BucketStorage
from .storage.local_bucket_storage import LocalBucketStorage
from .tasks.mysql_task_repository import MySQLTaskRepository
from .tasks.repository import TaskRepository
from .tasks.service import TaskService
from .trials.mysql_trial_repository import MySQLPlayerTrialRepository
from .trials.repository import PlayerTrialRepository
from .trials.service import PlayerTrialService
from .visa.service import VisaTrackingService


@dataclass(frozen=True)
class Repositories:
    accounts: AccountRepository
    players: PlayerRepository
    housing: HousingRepository
    tasks: TaskRepository
    events: CalendarRepository
    attendance: AttendanceRepository
    medical: MedicalRepository
    trials: PlayerTrialRepository
    prospects: ProspectRepository
    documents: DocumentRepository
    grocery: GroceryOrderRepository
    wellpass: WellPassRepository
    bug_reports: BugReportRepository
    pickups: PickupRepository


@dataclass(frozen=True)
class Container:
    repos: Repositories
    storage: BucketStorage

    auth_service: AuthService
    staff_service: StaffService
    invite_service: StaffInviteService
    player_service: PlayerService
    whereabouts_service: WhereaboutsService
    room_allocation_service: RoomAllocationService
    task_service: TaskService
    calendar_service: CalendarService
    attendance_service: AttendanceService
    medical_service: MedicalService
    trial_service: PlayerTrialService
    pickup_service: PickupService
    prospect_service: ProspectService
    conversion_service: ProspectConversionService
    document_service: DocumentService
    visa_service: VisaTrackingService
    grocery_service: GroceryService
    operations_service: OperationsService
    bug_report_service: BugReportService
    dashboard_service: DashboardService


def mysql_repositories(conn: DatabaseConnection) -> Repositories:
    return Repositories(
        accounts=MySQLAccountRepository(conn),
        players=MySQLPlayerRepository(conn),
        housing=MySQLHousingRepository(conn),
        tasks=MySQLTaskRepository(conn),
        events=MySQLCalendarRepository(conn),
        attendance=MySQLAttendanceRepository(conn),
        medical=MySQLMedicalRepository(conn),
        trials=MySQLPlayerTrialRepository(conn),
        prospects=MySQLProspectRepository(conn),
        documents=MySQLDocumentRepository(conn),
        grocery=MySQLGroceryOrderRepository(conn),
        wellpass=MySQLWellPassRepository(conn),
        bug_reports=MySQLBugReportRepository(conn),
        pickups=MySQLPickupRepository(conn),
    )


def wire(repos: Repositories, storage: BucketStorage, *, secret_key: str, clock=None) -> Container:
    """Build every service on top of `repos`."""
    timed = {"clock": clock} if clock is not None else {}

    player_service = PlayerService(repos.players)
    room_allocation_service = RoomAllocationService(repos.housing)
    document_service = DocumentService(repos.documents, storage, **timed)

    return Container(
        repos=repos,
        storage=storage,
        auth_service=AuthService(repos.accounts),
        staff_service=StaffService(repos.accounts),
        invite_service=StaffInviteService(repos.accounts, secret_key=secret_key),
        player_service=player_service,
        whereabouts_service=WhereaboutsService(repos.players),
        room_allocation_service=room_allocation_service,
        task_service=TaskService(repos.tasks),
        calendar_service=CalendarService(
            repos.events,
            players=repos.players,
            trials=repos.trials,
            prospects=repos.prospects,
            medical=repos.medical,
            **timed,
        ),
        attendance_service=AttendanceService(repos.attendance, players=repos.players, events=repos.events, **timed),
        medical_service=MedicalService(repos.medical),
        trial_service=PlayerTrialService(repos.trials),
        pickup_service=PickupService(repos.pickups, events=repos.events, players=repos.players),
        prospect_service=ProspectService(repos.prospects, storage, **timed),
        conversion_service=ProspectConversionService(
            prospects=repos.prospects,
            accounts=repos.accounts,
            player_service=player_service,
            documents=repos.documents,
            storage=storage,
            **timed,
        ),
        document_service=document_service,
        visa_service=VisaTrackingService(
            repos.players,
            documents=repos.documents,
            document_service=document_service,
            **timed,
        ),
        grocery_service=GroceryService(repos.grocery, housing=repos.housing, **timed),
        operations_service=OperationsService(
            repos.wellpass,
            medical=repos.medical,
            trials=repos.trials,
            grocery=repos.grocery,
        ),
        bug_report_service=BugReportService(repos.bug_reports),
        dashboard_service=DashboardService(
            players=repos.players,
            tasks=repos.tasks,
            events=repos.events,
            trials=repos.trials,
            housing=room_allocation_service,
            **timed,
        ),
    )


def build_container(*, db_config: dict, storage_root: str, secret_key: str, signed_url_max_age: int = 3600) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
    storage = LocalBucketStorage(storage_root, secret_key=secret_key, max_age=signed_url_max_age)
    return wire(mysql_repositories(conn), storage, secret_key=secret_key)
