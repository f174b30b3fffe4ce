"""Win The Day core library: day ledger, persistence and statistics.

Public API re-exports for convenient imports:
    from wintheday import recompute, open_day, FileStore, ...
"""

# Workspace & paths
from wintheday.workspace import (
    workspace_root,
    get_user_timezone,
    today_str,
    profile_path,
    data_dir,
    backups_dir,
    log_dir,
)

# Settings
from wintheday.config import Settings, load_settings, init_workspace

# Models
from wintheday.models import (
    WIN,
    LOSS,
    IN_PROGRESS,
    VALID_STATUSES,
    TASKS_PER_DAY,
    Task,
    DayRecord,
    Ledger,
)

# Ledger
from wintheday.ledger import (
    recompute,
    count_streak,
    settle_past_days,
    blank_tasks,
    normalize_tasks,
    completed_count,
    day_status,
    toggle_task,
    set_task_text,
    apply_suggestions,
)

# Stores & persistence
from wintheday.store import STORAGE_KEY, KeyValueStore, MemoryStore, FileStore
from wintheday.persistence import (
    InvalidBackupError,
    load_or_init,
    seed_tasks,
    save_ledger,
    backup_filename,
    export_backup,
    write_backup_file,
    import_backup,
)

# Day pipeline
from wintheday.tracker import (
    DayView,
    open_day,
    update_tasks,
    current_tasks,
    toggle,
    edit_text,
    apply_suggested,
    restore_backup,
)

# Statistics
from wintheday.stats import (
    StatsSummary,
    MonthGrid,
    DayCell,
    compute_stats,
    win_loss_totals,
    win_rate,
    last_seven_days,
    month_summary,
    month_grid,
    shift_month,
    streak_runs,
)
