from django.apps import AppConfig


class DonationsAppConfig(AppConfig):
    name = "donations"
    verbose_name = "Donations and needs"
