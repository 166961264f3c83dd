import asyncio

from asgiref.sync import async_to_sync
from channels.layers import InMemoryChannelLayer
from django.test import SimpleTestCase

from websocket_chat.services import MESSAGE_SENT, RECEIVE_MESSAGE, DeliveryChannel, user_group_name


class UserGroupNameTest(SimpleTestCase):
    def test_plain_ids(self):
        self.assertEqual(user_group_name("farmer-1"), "user_farmer-1")
        self.assertEqual(user_group_name(42), "user_42")

    def test_unsafe_ids_are_hashed(self):
        name = user_group_name("ramesh@example.com")

        self.assertTrue(name.startswith("user_h"))
        self.assertNotIn("@", name)
        self.assertEqual(name, user_group_name("ramesh@example.com"))
        self.assertNotEqual(name, user_group_name("asha@example.com"))

    def test_long_ids_are_hashed(self):
        name = user_group_name("x" * 200)
        self.assertLess(len(name), 100)


class DeliveryChannelTest(SimpleTestCase):
    def setUp(self):
        self.layer = InMemoryChannelLayer()
        self.delivery = DeliveryChannel(channel_layer=self.layer)
        self.message = {
            "id": 1,
            "senderId": "buyer-1",
            "receiverId": "farmer-1",
            "message": "hello",
        }

    def test_deliver_reaches_receiver_and_sender(self):
        async_to_sync(self.delivery.subscribe)("farmer-1", "test.farmer")
        async_to_sync(self.delivery.subscribe)("buyer-1", "test.buyer")

        async_to_sync(self.delivery.deliver)(self.message)

        received = async_to_sync(self.layer.receive)("test.farmer")
        echoed = async_to_sync(self.layer.receive)("test.buyer")
        self.assertEqual(received, {"type": RECEIVE_MESSAGE, "message": self.message})
        self.assertEqual(echoed, {"type": MESSAGE_SENT, "message": self.message})

    def test_deliver_reaches_every_socket_of_receiver(self):
        async_to_sync(self.delivery.subscribe)("farmer-1", "test.tab1")
        async_to_sync(self.delivery.subscribe)("farmer-1", "test.tab2")

        async_to_sync(self.delivery.deliver)(self.message)

        self.assertEqual(async_to_sync(self.layer.receive)("test.tab1")["type"], RECEIVE_MESSAGE)
        self.assertEqual(async_to_sync(self.layer.receive)("test.tab2")["type"], RECEIVE_MESSAGE)

    def test_deliver_to_offline_user_is_a_no_op(self):
        async_to_sync(self.delivery.deliver)(self.message)

    def test_unsubscribed_socket_gets_nothing(self):
        async_to_sync(self.delivery.subscribe)("farmer-1", "test.farmer")
        async_to_sync(self.delivery.unsubscribe)("farmer-1", "test.farmer")

        async_to_sync(self.delivery.deliver)(self.message)

        with self.assertRaises(asyncio.TimeoutError):
            async_to_sync(asyncio.wait_for)(self.layer.receive("test.farmer"), timeout=0.1)
