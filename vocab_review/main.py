from vocab_review.app import AppSettings, build_review_service

__all__ = ["main"]


def main() -> None:
    """Apply pending migrations and verify the review service can be built."""
    settings = AppSettings.from_env()
    build_review_service(settings)
    print(f"{settings.app_name} is ready in {settings.app_env} mode.")


if __name__ == "__main__":
    main()
