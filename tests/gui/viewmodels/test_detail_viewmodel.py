"""Tests for CardDetailViewModel navigation over loaded cards."""

from conftest import make_cards

from cardbrowser.domain.models.core import Card
from cardbrowser.gui.viewmodels.detail_viewmodel import CardDetailViewModel


def _make_vm(cards):
    holder = {"cards": tuple(cards)}
    vm = CardDetailViewModel(lambda: holder["cards"])
    return vm, holder


class TestCardDetailViewModel:
    def test_select_opens_overlay(self):
        cards = make_cards("OP01", 3)
        vm, _ = _make_vm(cards)
        changed = []
        vm.card_changed.connect(changed.append)

        vm.select(cards[1])

        assert vm.is_open.value is True
        assert vm.current_card.value == cards[1]
        assert changed == [cards[1]]

    def test_next_and_previous(self):
        cards = make_cards("OP01", 3)
        vm, _ = _make_vm(cards)
        vm.select(cards[1])

        assert vm.next() == cards[2]
        assert vm.previous() == cards[1]
        assert vm.previous() == cards[0]

    def test_stops_at_first_card(self):
        cards = make_cards("OP01", 2)
        vm, _ = _make_vm(cards)
        vm.select(cards[0])

        assert vm.previous() is None
        assert vm.current_card.value == cards[0]

    def test_stops_at_last_loaded_card(self):
        cards = make_cards("OP01", 2)
        vm, _ = _make_vm(cards)
        vm.select(cards[1])

        assert vm.next() is None
        assert vm.current_card.value == cards[1]

    def test_follows_list_growth(self):
        cards = make_cards("OP01", 2)
        vm, holder = _make_vm(cards)
        vm.select(cards[1])
        more = make_cards("OP02", 1)
        holder["cards"] = tuple(cards + more)

        assert vm.next() == more[0]

    def test_locates_selection_by_id(self):
        cards = make_cards("OP01", 3)
        vm, _ = _make_vm(cards)
        # Equal id, different display data.
        vm.select(Card(id=cards[0].id, name="renamed"))

        assert vm.next() == cards[1]

    def test_unknown_selection_does_not_move(self):
        vm, _ = _make_vm(make_cards("OP01", 2))
        stray = Card(id="ST01-001")
        vm.select(stray)

        assert vm.next() is None
        assert vm.previous() is None
        assert vm.current_card.value == stray

    def test_step_without_selection(self):
        vm, _ = _make_vm(make_cards("OP01", 2))
        assert vm.next() is None

    def test_close(self):
        cards = make_cards("OP01", 1)
        vm, _ = _make_vm(cards)
        vm.select(cards[0])

        vm.close()

        assert vm.is_open.value is False
        assert vm.current_card.value is None
