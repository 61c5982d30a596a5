"""Mixed workload approximating real storefront traffic.

Browsing dominates; a smaller share of visitors check out and an
occasional admin maintains the catalogue.
"""

from locust import HttpUser, between

from loadtests.scenarios.browsing import CouponHunterJourney, WindowShoppingJourney
from loadtests.scenarios.checkout import BackOfficeJourney, CheckoutJourney


class MixedWorkloadUser(HttpUser):
    wait_time = between(0.5, 3.0)

    tasks = {
        WindowShoppingJourney: 12,
        CouponHunterJourney: 3,
        CheckoutJourney: 4,
        BackOfficeJourney: 1,
    }
