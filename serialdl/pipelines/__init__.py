from serialdl.pipelines.append import AppendWriter
from serialdl.pipelines.clean_html import CleanHtmlPipeline
from serialdl.pipelines.resume import filter_pending, scan_resume_state

__all__ = [
    'AppendWriter',
    'CleanHtmlPipeline',
    'filter_pending',
    'scan_resume_state',
]
