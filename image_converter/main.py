"""Точка входа в приложение."""
from image_converter.app import ImageConverterApp
from image_converter.logger import setup_logger


def main() -> None:
    """Настраивает логирование, создаёт и запускает главное окно приложения."""
    setup_logger()
    app = ImageConverterApp()
    app.mainloop()


if __name__ == "__main__":
    main()
