"""Developer tools for dictionary representations."""

from .report import Difference as Difference
from .report import ReportNode as ReportNode
from .report import build_report as build_report
from .report import differences as differences
