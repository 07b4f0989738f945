"""User facing message templates."""

BAD_CHAT_ID = "🙅 This chat is not permitted to use me. Bye!"
ACCESS_DECLINED = '🚫 You have no access to "{accessed_cmd}". Ask permission from chat owner.'
UNKNOWN_USER = "🤖 I don't know who you are. Sorry, mate. Don't speak to strangers."

BUTTON_HANDLER_MISSED = "🤖 This button does nothing. Press /ngrok and try again."
BAD_INLINE_DATA_TYPE = "🤖 I can't understand this button. Press /ngrok and try again."
BAD_OPTION_SELECTED = "🤖 This option does not exist anymore. Press /ngrok and try again."

START = "🤖 Press /ngrok"
CHOOSE_PROFILE = "🤖 Choose ngrok config to start expose target:"
NO_PROFILES = "🤖 No commands for you, pal. Sorry. Ask permission from chat owner, maybe?"
NGROK_KILLED = "🫡 Ngrok killed!"
NGROK_ALREADY_DEAD = "💀 Ngrok actually dead..."
HELP = "🤖 Available commands:\n{commands}."
UNKNOWN_COMMAND = (
    "💅🏻 This command does not exist, you dummy!"
    "\n\nHere are available commands:\n{commands}."
)

DEFAULT_HOWTO = "Nothing special, just use it"
NGROK_TUNNEL_OBTAINED = (
    "✅ {connection_report}\n\n"
    "🌍 URL: {url}\n"
    "🏠 Host: {host}\n"
    "🚪 Port: {port}\n\n"
    "📖 How to: {howto}"
)
NGROK_API_CONNECTION_ERROR = "❌ Can't get tunnel from ngrok API: {error_description}"
