"""
Cart Aggregator Tests
"""

from chiya.domain.entities.cart_entity import Cart
from chiya.domain.value_objects.money import Money


class TestCart:
    """Test the client-local cart"""

    def test_add_inserts_then_increments(self, masala_tea):
        cart = Cart()
        cart.add(masala_tea)
        cart.add(masala_tea)

        assert len(cart) == 1
        assert cart.get(masala_tea.id).quantity == 2
        assert cart.item_count == 2

    def test_remove_absent_item_is_noop(self, masala_tea):
        cart = Cart()
        cart.add(masala_tea)
        cart.remove("missing")
        assert masala_tea.id in cart

    def test_set_quantity_overwrites(self, masala_tea):
        cart = Cart()
        cart.add(masala_tea)
        cart.set_quantity(masala_tea.id, 7)
        assert cart.get(masala_tea.id).quantity == 7
        assert cart.total() == Money.of(280)

    def test_set_quantity_zero_or_negative_removes(self, masala_tea, samosa):
        cart = Cart()
        cart.add(masala_tea)
        cart.add(samosa)
        cart.set_quantity(masala_tea.id, 0)
        cart.set_quantity(samosa.id, -2)
        assert cart.is_empty()

    def test_set_quantity_for_absent_item_does_not_insert(self, masala_tea):
        cart = Cart()
        cart.set_quantity(masala_tea.id, 3)
        assert cart.is_empty()

    def test_total_sums_discounted_lines(self, masala_tea, samosa, discounted_item):
        cart = Cart()
        cart.add(masala_tea)
        cart.add(masala_tea)
        cart.add(samosa)
        assert cart.total() == Money.of(110)

        cart.add(discounted_item)
        assert cart.total() == Money.of(190)

    def test_discounted_item_two_units(self, discounted_item):
        cart = Cart()
        cart.add(discounted_item)
        assert cart.get(discounted_item.id).line_total == Money.of(80)
        cart.add(discounted_item)
        assert cart.total() == Money.of(160)

    def test_add_then_remove_restores_total(self, masala_tea, samosa):
        cart = Cart()
        cart.add(masala_tea)
        before = cart.total()

        cart.add(samosa)
        cart.remove(samosa.id)

        assert cart.total() == before

    def test_entries_keep_insertion_order(self, masala_tea, samosa, discounted_item):
        cart = Cart()
        cart.add(samosa)
        cart.add(discounted_item)
        cart.add(masala_tea)
        cart.add(samosa)
        assert [entry.item_id for entry in cart.items] == [
            samosa.id,
            discounted_item.id,
            masala_tea.id,
        ]

    def test_cart_holds_its_own_item_copy(self, masala_tea):
        cart = Cart()
        cart.add(masala_tea)
        masala_tea.update_price(Money.of(55))
        assert cart.total() == Money.of(40)

    def test_clear(self, masala_tea):
        cart = Cart()
        cart.add(masala_tea)
        cart.clear()
        assert cart.is_empty()
        assert cart.total() == Money.zero()

    def test_total_in_cart_currency(self):
        assert Cart("usd").total() == Money.zero("USD")
