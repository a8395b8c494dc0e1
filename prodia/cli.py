"""
Interactive CLI adapter for the Prodia client.

Architectural role:
- Exposes terminal interaction, including runtime model-family switching.
- Delegates every remote call to `prodia.client.ProdiaClient`.

Request lifecycle (per input line):
1. Read stdin.
2. Handle local control commands (`exit`/`quit`, `/family`, list commands, `/job`).
3. Route any other text as a prompt to the active family's generate endpoint.
4. Wait for the job and print the resulting image URL.

Input validation behavior:
- Empty input is ignored.
- `/family` validates the requested family against `FAMILIES`.
- Startup aborts if no API key can be resolved.

Error handling strategy:
- Prodia errors and HTTP transport errors are printed and the loop continues.
- EOF and keyboard interrupts terminate the loop without traceback output.
"""

from dotenv import load_dotenv

load_dotenv()

import asyncio
import logging

import httpx

from prodia.client import ProdiaClient
from prodia.errors import ProdiaError


logger = logging.getLogger(__name__)


# =========================================================
# FAMILY MANAGEMENT
# =========================================================

FAMILIES = ("sd", "sdxl")

# Client coroutine names per (listing, family).
LIST_COMMANDS = {
    "/models": {"sd": "get_models", "sdxl": "get_sdxl_models"},
    "/samplers": {"sd": "get_samplers", "sdxl": "get_sdxl_samplers"},
    "/loras": {"sd": "get_loras", "sdxl": "get_sdxl_loras"},
    "/embeddings": {"sd": "get_embeddings", "sdxl": "get_sdxl_embeddings"},
}

current_family = "sd"


def set_family(family_name):
    """Update the global family pointer when the requested family exists."""
    global current_family

    family_name = family_name.lower()
    if family_name not in FAMILIES:
        return False

    current_family = family_name
    return True


async def list_options(client, command):
    """Return the catalogue for a list command under the active family."""
    method_name = LIST_COMMANDS[command][current_family]
    return await getattr(client, method_name)()


async def generate_and_wait(client, prompt):
    """Submit a prompt on the active family and wait for the finished job."""
    params = {"prompt": prompt}
    if current_family == "sdxl":
        job = await client.generate_sdxl(params)
    else:
        job = await client.generate(params)

    print(f"Job {job.job} {job.status.value}...")
    return await client.wait(job)


def print_help():
    print("\nCommands:")
    print(" /family <sd|sdxl>")
    for command in LIST_COMMANDS:
        print(f" {command}")
    print(" /job <id>")
    print(" exit | quit")
    print(f"\nActive family: {current_family}\n")


# =========================================================
# MAIN
# =========================================================

def main():
    """
    Run the CLI loop with family controls and generation dispatch.

    Error handling strategy:
    - Missing API key aborts startup with message.
    - Prodia and transport errors are reported per command.
    - EOF/interrupt are handled without stack traces.
    """
    logging.basicConfig(level=logging.WARNING)

    try:
        client = ProdiaClient.from_env()
    except RuntimeError as e:
        print(f"Startup error: {e}")
        return

    print("Prodia CLI started. (Type 'exit' to quit, '/help' for commands)")
    print(f"Active family: {current_family}\n")
    print("-" * 60)

    while True:

        try:
            text = input("Prompt: ").strip()

        except EOFError:
            print()
            break

        except KeyboardInterrupt:
            print("\nOperation cancelled by user.")
            break

        if not text:
            continue

        lowered = text.lower()
        command = lowered.split()[0]

        # EXIT
        if lowered in ("exit", "quit"):
            print("Shutting down.")
            break

        if lowered == "/help":
            print_help()
            continue

        try:
            # FAMILY COMMAND
            if command == "/family":
                parts = text.split()
                if len(parts) == 1:
                    print_help()
                elif set_family(parts[1]):
                    print(f"\nSwitched to family: {current_family}\n")
                else:
                    print(f"\nFamily '{parts[1]}' not found.\n")
                continue

            # LIST COMMANDS
            if lowered in LIST_COMMANDS:
                for option in asyncio.run(list_options(client, lowered)):
                    print(f" - {option}")
                continue

            # JOB LOOKUP
            if command == "/job":
                parts = text.split()
                if len(parts) != 2:
                    print("Usage: /job <id>")
                    continue
                result = asyncio.run(client.get_job(parts[1]))
                print(f"{result.job}: {result.status.value} {result.image_url or ''}".rstrip())
                continue

            # NORMAL PROMPT FLOW
            result = asyncio.run(generate_and_wait(client, text))
            print(f"\nImage: {result.image_url}")

        except ProdiaError as e:
            logger.debug("Command %r failed", text, exc_info=True)
            print(f"\nProdia error: {e}\n")

        except httpx.HTTPError as e:
            logger.debug("Command %r failed", text, exc_info=True)
            print(f"\nConnection error: {e}\n")

        except KeyboardInterrupt:
            print("\nOperation cancelled by user.")
            continue

        print("\n" + "-" * 60 + "\n")


if __name__ == "__main__":
    main()
