from .report import format_money, generate_report, write_report

__all__ = [
    "format_money",
    "generate_report",
    "write_report",
]
