import pytest
from menu import reset_menu, set_menu
from menu.memory_adapter import InMemoryMenu
from menu.port import MenuItem
from notifications.sink import reset_sink, set_sink
from notifications.sink.fake_adapter import FakeNotificationSink
from ordering.settings import reset_settings_provider
from payments.gateway import reset_gateway, set_gateway
from payments.gateway.razorpay_adapter import RazorpayGateway
from protean.integrations.pytest import DomainFixture
from storefront import reset_storefront

GATEWAY_SECRET = "test-key-secret"

# Restaurant defaults to (20.6952266, 83.488972); a point ~2.5 km north.
NEARBY = {"latitude": 20.7177, "longitude": 83.488972}
# Roughly 22 km north, outside the default 10 km radius.
FAR_AWAY = {"latitude": 20.895, "longitude": 83.488972}


@pytest.fixture(scope="session")
def ordering_bed():
    from ordering.domain import ordering

    bed = DomainFixture(ordering)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(ordering_bed):
    with ordering_bed.domain_context():
        yield


@pytest.fixture()
def menu():
    catalog = InMemoryMenu(
        [
            MenuItem(menu_item_id="paneer-tikka", name="Paneer Tikka", price=250.0, category="starters"),
            MenuItem(menu_item_id="butter-naan", name="Butter Naan", price=40.0, category="breads"),
            MenuItem(menu_item_id="thali", name="Veg Thali", price=1200.0, category="mains"),
            MenuItem(menu_item_id="kulfi", name="Kulfi", price=90.0, available=False, category="desserts"),
        ]
    )
    set_menu(catalog)
    yield catalog
    reset_menu()


@pytest.fixture()
def gateway():
    gw = RazorpayGateway(key_secret=GATEWAY_SECRET)
    set_gateway(gw)
    yield gw
    reset_gateway()


@pytest.fixture(autouse=True)
def sink():
    fake = FakeNotificationSink()
    set_sink(fake)
    yield fake
    reset_sink()


@pytest.fixture(autouse=True)
def _reset_adapters():
    yield
    reset_settings_provider()
    reset_storefront()


@pytest.fixture()
def far_away():
    return dict(FAR_AWAY)


@pytest.fixture()
def address():
    return {
        "name": "Asha",
        "phone": "9876543210",
        "line1": "12 Station Road",
        "city": "Balangir",
        "pincode": "767001",
        **NEARBY,
    }
