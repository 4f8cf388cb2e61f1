# demo_mcp_pdf_roundtrip.py
# Version: v1
#
# Demo: write a multi-page PDF from text with write_pdf, then read it back
# with read_pdf and print the page count.
#
# Usage:
#
#   python demo_mcp_pdf_roundtrip.py [output.pdf]

import asyncio
import json
import sys

from cursor_mcp_servers.tools import pdf


async def main() -> None:
    output_path = sys.argv[1] if len(sys.argv) > 1 else "out/demo.pdf"
    registry = await pdf.build()

    text = "\n".join(f"Line {i + 1}" for i in range(80))
    written = await registry.dispatch(
        "write_pdf", {"content": {"text": text}, "output_path": output_path}
    )
    print(written.content[0].text)
    print(written.content[1].text)

    read = await registry.dispatch("read_pdf", {"input": output_path})
    payload = json.loads(read.content[1].text)
    print(f"pageCount={payload['pageCount']} hasFormFields={payload['hasFormFields']}")


if __name__ == "__main__":
    asyncio.run(main())
