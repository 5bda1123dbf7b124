"""
Async Scheduler Example

This example demonstrates deferred work on an asyncio loop:
1. Create an editor with an AsyncioFrameScheduler
2. Focus, then blur (blur is deferred to the next loop iteration)
3. Destroy an editor with a pending blur (the task is cancelled)

Run: python -m examples.02-async-scheduler.main
"""

import asyncio

from blockslides import Editor
from blockslides.kit import StarterKit
from blockslides.scheduler import AsyncioFrameScheduler


async def main():
    editor = Editor([StarterKit], content="<p>Hello</p>", scheduler=AsyncioFrameScheduler())
    editor.on("focus", lambda *, editor: print("  focus"))
    editor.on("blur", lambda *, editor: print("  blur"))

    editor.commands.focus("end")
    editor.commands.blur()
    print(f"Focused right after blur(): {editor.is_focused}")

    await asyncio.sleep(0)
    print(f"Focused on the next iteration: {editor.is_focused}")
    print()

    # A blur still pending when the editor is destroyed never runs
    other = Editor([StarterKit], scheduler=AsyncioFrameScheduler())
    other.commands.focus()
    other.commands.blur()
    other.destroy()

    await asyncio.sleep(0)
    print(f"Destroyed editor still focused: {other.is_focused}")

    editor.destroy()


if __name__ == "__main__":
    asyncio.run(main())
