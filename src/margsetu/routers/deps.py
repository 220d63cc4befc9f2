from fastapi import Request

from margsetu.core import GpsCipher, MessageLog

# Both objects are created by the application factory and live on app.state


def get_cipher(request: Request) -> GpsCipher:
    return request.app.state.cipher


def get_message_log(request: Request) -> MessageLog:
    return request.app.state.message_log
