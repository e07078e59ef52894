# agency_portal/shared/database/models.py
from sqlalchemy import (
    Column, Integer, String, Boolean, Date, DateTime, Text,
    ForeignKey, UniqueConstraint, CheckConstraint, func
)
from sqlalchemy.orm import relationship, declarative_base

Base = declarative_base()

# =====================================================
# ENUM VALUES
# =====================================================

ROLES = ("Admin", "Manager", "SalesStaff", "TeamLeader", "Agent")
AGENT_ROLES = ("Agent", "TeamLeader")
REPORT_TYPES = ("daily", "weekly", "monthly")
REPORT_STATUSES = ("pending", "approved", "rejected")
MESSAGE_TYPES = ("direct", "announcement", "report_feedback")
HELP_REQUEST_STATUSES = ("open", "in_progress", "resolved", "closed")


def _in_check(column: str, values) -> str:
    quoted = ", ".join(f"'{v}'" for v in values)
    return f"{column} IN ({quoted})"


# =====================================================
# MIXIN FOR TIMESTAMPS
# =====================================================
class TimestampMixin:
    """Adds created_at and updated_at columns"""
    created_at = Column(DateTime, nullable=False, server_default=func.current_timestamp())
    updated_at = Column(DateTime, nullable=False, server_default=func.current_timestamp(), onupdate=func.current_timestamp())


# =====================================================
# USERS
# =====================================================

class User(Base, TimestampMixin):
    """Portal user. created_by_id links each user to whoever created it."""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    work_id = Column(String(50), unique=True, nullable=False, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    full_name = Column(String(255), nullable=False)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False)
    created_by_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)
    is_active = Column(Boolean, nullable=False, default=True)

    __table_args__ = (
        CheckConstraint(_in_check("role", ROLES), name="users_role_check"),
    )

    # Relationships
    created_by = relationship("User", remote_side=[id], back_populates="created_users")
    created_users = relationship("User", back_populates="created_by")
    attendance_timeframe = relationship(
        "AttendanceTimeframe", back_populates="sales_staff", uselist=False
    )
    attendance_records = relationship(
        "AttendanceRecord", back_populates="agent", foreign_keys="AttendanceRecord.agent_id"
    )
    clients = relationship("Client", back_populates="agent")

    @property
    def is_agent(self) -> bool:
        return self.role in AGENT_ROLES


# =====================================================
# ATTENDANCE
# =====================================================

class AttendanceTimeframe(Base, TimestampMixin):
    """Daily check-in window configured by a sales staff (HH:MM strings)"""
    __tablename__ = "attendance_timeframes"

    id = Column(Integer, primary_key=True, index=True)
    sales_staff_id = Column(Integer, ForeignKey("users.id"), nullable=False, unique=True)
    start_time = Column(String(5), nullable=False)
    end_time = Column(String(5), nullable=False)

    sales_staff = relationship("User", back_populates="attendance_timeframe")


def _check_in_date_default(context):
    return context.get_current_parameters()["check_in_time"].date()


class AttendanceRecord(Base):
    """Agent check-in"""
    __tablename__ = "attendance"

    id = Column(Integer, primary_key=True, index=True)
    agent_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    check_in_time = Column(DateTime, nullable=False, index=True)
    check_in_date = Column(Date, nullable=False, default=_check_in_date_default)
    is_late = Column(Boolean, nullable=False, default=False)
    is_excused = Column(Boolean, nullable=False, default=False)
    excused_by_id = Column(Integer, ForeignKey("users.id"))
    excuse_reason = Column(Text)
    created_at = Column(DateTime, nullable=False, server_default=func.current_timestamp())

    __table_args__ = (
        UniqueConstraint('agent_id', 'check_in_date', name='attendance_agent_date_key'),
    )

    agent = relationship("User", back_populates="attendance_records", foreign_keys=[agent_id])
    excused_by = relationship("User", foreign_keys=[excused_by_id])


# =====================================================
# AGENT GROUPS
# =====================================================

class AgentGroup(Base, TimestampMixin):
    """Group of agents led by a team leader"""
    __tablename__ = "agent_groups"

    id = Column(Integer, primary_key=True, index=True)
    team_leader_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    sales_staff_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)

    team_leader = relationship("User", foreign_keys=[team_leader_id])
    sales_staff = relationship("User", foreign_keys=[sales_staff_id])
    members = relationship("AgentGroupMember", back_populates="group", cascade="all, delete-orphan")


class AgentGroupMember(Base):
    __tablename__ = "agent_group_members"

    id = Column(Integer, primary_key=True, index=True)
    group_id = Column(Integer, ForeignKey("agent_groups.id"), nullable=False, index=True)
    agent_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    created_at = Column(DateTime, nullable=False, server_default=func.current_timestamp())

    __table_args__ = (
        UniqueConstraint('group_id', 'agent_id', name='agent_group_members_group_agent_key'),
    )

    group = relationship("AgentGroup", back_populates="members")
    agent = relationship("User")


# =====================================================
# CLIENTS
# =====================================================

class Client(Base, TimestampMixin):
    """Client acquired by an agent"""
    __tablename__ = "clients"

    id = Column(Integer, primary_key=True, index=True)
    agent_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    full_name = Column(String(255), nullable=False)
    email = Column(String(255))
    phone = Column(String(50), nullable=False)
    insurance_type = Column(String(100), nullable=False)
    policy_details = Column(Text)
    interaction_time = Column(DateTime, nullable=False, index=True)
    requires_follow_up = Column(Boolean, nullable=False, default=False)
    follow_up_date = Column(DateTime)

    agent = relationship("User", back_populates="clients")


# =====================================================
# REPORTS
# =====================================================

class Report(Base, TimestampMixin):
    __tablename__ = "reports"

    id = Column(Integer, primary_key=True, index=True)
    submitted_by_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    reviewed_by_id = Column(Integer, ForeignKey("users.id"))
    title = Column(String(255), nullable=False)
    report_type = Column(String(20), nullable=False)
    status = Column(String(20), nullable=False, default='pending')
    content = Column(Text, nullable=False)
    is_aggregated = Column(Boolean, nullable=False, default=False)
    parent_report_id = Column(Integer, ForeignKey("reports.id"))
    feedback = Column(Text)

    __table_args__ = (
        CheckConstraint(_in_check("report_type", REPORT_TYPES), name="reports_type_check"),
        CheckConstraint(_in_check("status", REPORT_STATUSES), name="reports_status_check"),
    )

    submitted_by = relationship("User", foreign_keys=[submitted_by_id])
    reviewed_by = relationship("User", foreign_keys=[reviewed_by_id])
    parent_report = relationship("Report", remote_side=[id], back_populates="child_reports")
    child_reports = relationship("Report", back_populates="parent_report")


# =====================================================
# HELP REQUESTS & MESSAGES
# =====================================================

class HelpRequest(Base, TimestampMixin):
    __tablename__ = "help_requests"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    assigned_to_id = Column(Integer, ForeignKey("users.id"))
    request_type = Column(String(100), nullable=False)
    issue = Column(Text, nullable=False)
    status = Column(String(20), nullable=False, default='open')
    resolution = Column(Text)

    __table_args__ = (
        CheckConstraint(_in_check("status", HELP_REQUEST_STATUSES), name="help_requests_status_check"),
    )

    user = relationship("User", foreign_keys=[user_id])
    assigned_to = relationship("User", foreign_keys=[assigned_to_id])


class Message(Base):
    __tablename__ = "messages"

    id = Column(Integer, primary_key=True, index=True)
    sender_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    receiver_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    message_type = Column(String(20), nullable=False, default='direct')
    content = Column(Text, nullable=False)
    related_report_id = Column(Integer, ForeignKey("reports.id"))
    is_read = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, nullable=False, server_default=func.current_timestamp())

    __table_args__ = (
        CheckConstraint(_in_check("message_type", MESSAGE_TYPES), name="messages_type_check"),
    )

    sender = relationship("User", foreign_keys=[sender_id])
    receiver = relationship("User", foreign_keys=[receiver_id])


# =====================================================
# PERFORMANCE
# =====================================================

class PerformanceMetric(Base, TimestampMixin):
    """Snapshot of an agent's performance for a period (daily/weekly/monthly)"""
    __tablename__ = "performance_metrics"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    period = Column(String(20), nullable=False)
    clients_acquired = Column(Integer, nullable=False, default=0)
    attendance_rate = Column(Integer, nullable=False, default=0)
    performance_score = Column(Integer, nullable=False, default=0)
    performance_trend = Column(Integer, nullable=False, default=0)
    reports_submitted = Column(Integer, nullable=False, default=0)
    report_approval_rate = Column(Integer, nullable=False, default=0)

    __table_args__ = (
        UniqueConstraint('user_id', 'period', name='performance_metrics_user_period_key'),
    )

    user = relationship("User")
