"""
Script to submit a contact message to a running contact API, going through the
same client-side checks as the website form.
"""
import argparse
import asyncio
import sys
from pathlib import Path

# Add parent directory to path to import modules
sys.path.insert(0, str(Path(__file__).parent.parent))

from client.api_client import ContactApiClient
from client.contact_form import ContactForm


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Send a contact form submission")
    parser.add_argument("--base-url", default="http://localhost:8000", help="Contact API base URL")
    parser.add_argument("--name", required=True)
    parser.add_argument("--email", required=True)
    parser.add_argument("--subject", required=True)
    parser.add_argument("--message", required=True)
    parser.add_argument("--project-type", dest="project_type")
    parser.add_argument("--budget")
    return parser.parse_args(argv)


async def send_contact(args) -> int:
    form = ContactForm(ContactApiClient(args.base_url))
    form.set_value("name", args.name)
    form.set_value("email", args.email)
    form.set_value("subject", args.subject)
    form.set_value("message", args.message)
    form.set_value("projectType", args.project_type)
    form.set_value("budget", args.budget)

    sent = await form.submit()

    if sent:
        print(f"✅ {form.last_message}")
        return 0

    if form.last_error:
        print(f"❌ {form.last_error}")
    for field, message in form.errors.items():
        print(f"   {field}: {message}")
    return 1


if __name__ == "__main__":
    sys.exit(asyncio.run(send_contact(parse_args())))
