"""
yotox Library Example - Python

Replaces the audio on one card using the library API instead of the CLI.

Features demonstrated:
- Reading a stored token (refreshing it if expired)
- Building an UploadRequest from a local file
- Receiving progress events
- Listing cards
- Error handling

Requirements:
    pip install -e .
    yotox login --access-token ... --refresh-token ...

Usage:
    python examples/upload_card.py CARD_ID path/to/audio.mp3 "New title"
"""

import sys

from yotox import (
    AudioFile,
    CardRepository,
    ProgressEvent,
    TokenManager,
    TokenStore,
    UploadError,
    UploadRequest,
    YotoTransport,
    get_config,
    upload_to_card,
)


def print_progress(event: ProgressEvent) -> None:
    if event.failed:
        print(f"Upload failed: {event.error}")
    else:
        print(f"{event.stage.value}: {event.progress:.0f}%")


def main() -> int:
    if len(sys.argv) != 4:
        print(__doc__)
        return 1
    card_id, audio_path, title = sys.argv[1:]

    config = get_config()
    tokens = TokenManager(
        TokenStore(config.token_file),
        client_id=config.client_id,
        auth_url=config.auth_url,
    )
    access_token = tokens.get_valid_access_token()
    if not access_token:
        print("Session expired, please log in again")
        return 1

    with YotoTransport(access_token, config.api_base_url) as transport:
        for card in CardRepository(transport).list_cards():
            marker = "*" if card.get("cardId") == card_id else " "
            print(f"{marker} {card.get('cardId')} - {card.get('title')}")

    request = UploadRequest(
        audio_file=AudioFile.from_path(audio_path),
        title=title,
        card_id=card_id,
        access_token=access_token,
        api_base_url=config.api_base_url,
    )
    try:
        result = upload_to_card(request, on_progress=print_progress)
    except UploadError as e:
        print(f"Error during {e.stage}: {e}")
        return 1

    print("Card updated:", result.get("card", result).get("title"))
    return 0


if __name__ == "__main__":
    sys.exit(main())
