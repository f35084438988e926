import logging

from portal.config import LOG_LEVEL
from portal.session_manager import SessionManager


def main():
    logging.basicConfig(
        level=LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    manager = SessionManager()

    print("Thesis Portal")
    print("Type 'exit' to quit.\n")

    # Print the opening prompt without waiting for user input
    print(manager.start())

    while True:
        try:
            user_input = input("\n> ")
        except (EOFError, KeyboardInterrupt):
            print()
            break

        print(manager.handle_message(user_input))

        if manager.context.is_complete():
            break


if __name__ == "__main__":
    main()
