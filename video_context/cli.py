import argparse
import base64
import mimetypes
import sys
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text
from video_context.config import settings
from video_context.errors import VideoContextError
from video_context.services.video_context import VideoContextService

console = Console()

def format_time(seconds: float) -> str:
    m, s = divmod(int(seconds), 60)
    h, m = divmod(m, 60)
    if h > 0:
        return f"{h:02d}:{m:02d}:{s:02d}"
    return f"{m:02d}:{s:02d}"

def image_to_data_url(path: str) -> str:
    mime = mimetypes.guess_type(path)[0] or "image/jpeg"
    with open(path, "rb") as f:
        b64 = base64.b64encode(f.read()).decode("utf-8")
    return f"data:{mime};base64,{b64}"

def render_result(result):
    source = result.source
    # Header
    console.print(Panel(
        f"[bold blue]{source.title}[/bold blue]\n[italic]{source.owner}[/italic]\n"
        f"[dim]{source.bvid} · {format_time(source.duration)} · "
        f"{'LLM' if source.llm_used else 'fallback'}[/dim]",
        title="Video Info"
    ))

    console.print(Panel(Text(result.context), title="Context", border_style="green"))

    table = Table(title="Chapters", show_header=True, header_style="bold magenta")
    table.add_column("Time", style="cyan", width=15)
    table.add_column("Chapter", style="white")
    for chapter in result.chapters:
        time_range = f"{format_time(chapter.start_sec)} - {format_time(chapter.end_sec)}"
        table.add_row(time_range, f"[bold]{chapter.title}[/bold]\n{chapter.summary}")
        table.add_section()
    console.print(table)

def main():
    parser = argparse.ArgumentParser(description="Bilibili video context & chapters")
    parser.add_argument("url", nargs="?", help="Bilibili video URL or BV id")
    parser.add_argument("--url", dest="url", help="Bilibili video URL or BV id")
    parser.add_argument("--json", action="store_true", help="Print the result as JSON")
    parser.add_argument("--frame", help="Analyze a single frame image instead of a video")
    parser.add_argument("--context", default="", help="Video title used as context for --frame")
    parser.add_argument("--model", help="LLM Model to use")

    args = parser.parse_args()

    if args.model:
        settings.LLM_MODEL = args.model

    service = VideoContextService()

    if args.frame:
        try:
            image_data = image_to_data_url(args.frame)
        except OSError as e:
            console.print(f"[bold red]Error:[/bold red] {e}")
            sys.exit(1)
        with console.status("Analyzing frame..."):
            text = service.analyze_video_frame(image_data, args.context)
        console.print(Panel(Text(text), title="Frame", border_style="yellow"))
        return

    if not getattr(args, "url", None):
        parser.print_help()
        console.print("[red]Missing URL.[/red] Provide positional URL or --url.")
        sys.exit(2)

    url = args.url.strip().strip('`').strip('"').strip("'").strip()
    try:
        with console.status("Fetching video info, danmaku & chapters..."):
            result = service.get_video_context_and_chapters(url)
    except (VideoContextError, OSError) as e:
        # requests exceptions derive from OSError
        console.print(f"[bold red]Error:[/bold red] {e}")
        sys.exit(1)

    if args.json:
        console.print_json(result.model_dump_json(by_alias=True))
    else:
        render_result(result)

if __name__ == "__main__":
    main()
