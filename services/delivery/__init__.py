# services/delivery/__init__.py - Polling and dispatch
from .filter_gate import is_eligible
from .workunit_builder import WorkunitPlan, build_workunit_plan
from .message_formatter import MessageFormatter, format_notification
from .dispatch_engine import DispatchEngine
from .poll_scheduler import PollScheduler
