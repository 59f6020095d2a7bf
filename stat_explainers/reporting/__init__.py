"""Report generation for demonstration outputs."""

from .report_generator import ReportGenerator, build_demo_figures

__all__ = ["ReportGenerator", "build_demo_figures"]
