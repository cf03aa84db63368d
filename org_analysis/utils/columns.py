# org_analysis/utils/columns.py

# Roster columns
EMP_ID = "employee_id"
EMP_FIRST_NAME = "first_name"
EMP_LAST_NAME = "last_name"
EMP_SALARY = "salary"

# Derived metric columns
DIRECT_REPORT_COUNT = "direct_report_count"
AVG_SUBORDINATE_SALARY = "average_subordinate_salary"
EXPECTED_MIN_SALARY = "expected_min_salary"
EXPECTED_MAX_SALARY = "expected_max_salary"
MANAGER_DEPTH = "manager_depth"
SALARY_DEFICIT = "salary_deficit"
SALARY_EXCESS = "salary_excess"
EXCESS_MANAGER_COUNT = "excess_manager_count"

# Flags
IS_UNDERPAID = "is_underpaid"
IS_OVERPAID = "is_overpaid"
HAS_LONG_REPORTING_LINE = "has_long_reporting_line"

METRIC_COLS = [
    EMP_ID,
    EMP_FIRST_NAME,
    EMP_LAST_NAME,
    EMP_SALARY,
    DIRECT_REPORT_COUNT,
    AVG_SUBORDINATE_SALARY,
    EXPECTED_MIN_SALARY,
    EXPECTED_MAX_SALARY,
    SALARY_DEFICIT,
    SALARY_EXCESS,
    IS_UNDERPAID,
    IS_OVERPAID,
    MANAGER_DEPTH,
    EXCESS_MANAGER_COUNT,
    HAS_LONG_REPORTING_LINE,
]
