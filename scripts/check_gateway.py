import asyncio
import os
import sys

# Add project root to sys.path
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from brainbytes.core.config import settings
from brainbytes.services.chat.gateway import inference_gateway
from brainbytes.services.chat.guard import guarded_reply
from brainbytes.services.chat.subjects import resolve_subject

async def main(question: str):
    if not settings.GOOGLE_API_KEY:
        print("Error: GOOGLE_API_KEY not found in env.")
        sys.exit(1)

    subject = resolve_subject(question)
    print(f"Model: {settings.MODEL_NAME} | Subject: {subject} | Deadline: {settings.AI_TIMEOUT_SECONDS}s")
    result = await guarded_reply(inference_gateway.generate(question, subject))
    print(f"[{result['category']}] {result['response']}")

if __name__ == "__main__":
    asyncio.run(main(" ".join(sys.argv[1:]) or "What is an atom?"))
