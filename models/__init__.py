# models/__init__.py - Model imports
from .item import Item, ItemExtras, LiveState, derive_live_state
from .subscription import ContentFilters, Subscription, EPOCH
from .workunit import MessageHandle, ResyncEntry, Workunit, WorkunitState, TERMINAL_STATES
