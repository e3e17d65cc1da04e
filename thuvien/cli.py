"""Interactive text console for the library system."""

from __future__ import annotations

import argparse
import sys
from collections.abc import Callable
from typing import TextIO

from thuvien.library import Library
from thuvien.models import (
    MAX_BOOKS,
    MAX_BORROWED,
    MAX_READERS,
    Book,
    CapacityError,
    DuplicateError,
    NotFoundError,
    Reader,
    UnavailableError,
)
from thuvien.reservation import Priority

_RULE_WIDE = "-" * 88
_RULE_READERS = "-" * 74


class Console:
    """Menu-driven front end reading commands from a text stream."""

    def __init__(
        self,
        library: Library | None = None,
        stdin: TextIO | None = None,
        stdout: TextIO | None = None,
    ) -> None:
        self.library = library if library is not None else Library()
        self._in = stdin if stdin is not None else sys.stdin
        self._out = stdout if stdout is not None else sys.stdout

    # Input and output helpers

    def _say(self, text: str = "") -> None:
        self._out.write(text + "\n")

    def _prompt(self, text: str) -> None:
        self._out.write(text)
        self._out.flush()

    def _read_line(self) -> str:
        line = self._in.readline()
        if not line:
            raise EOFError
        return line.rstrip("\r\n")

    def _ask_line(self, text: str) -> str:
        self._prompt(text)
        return self._read_line()

    def _ask_token(self, text: str) -> str:
        self._prompt(text)
        while True:
            parts = self._read_line().split()
            if parts:
                return parts[0]

    def _ask_int(self, text: str) -> int | None:
        token = self._ask_token(text)
        try:
            return int(token)
        except ValueError:
            return None

    def _menu_loop(
        self,
        title: str,
        items: list[str],
        rule: str,
        actions: dict[int, Callable[[], None]],
        on_exit: Callable[[], None],
        invalid: str,
    ) -> None:
        while True:
            self._say()
            self._say(title)
            for item in items:
                self._say(item)
            self._say(rule)
            choice = self._ask_int("Nhập lựa chọn: ")
            if choice == 0:
                on_exit()
                return
            action = actions.get(choice) if choice is not None else None
            if action is None:
                self._say(invalid)
            else:
                action()

    # Main menu

    def _show_main_menu(self) -> None:
        self._say()
        self._say("=" * 45)
        self._say("        HỆ THỐNG QUẢN LÝ THƯ VIỆN")
        self._say("=" * 45)
        self._say("1. Quản lý danh mục sách")
        self._say("2. Quản lý mượn – trả sách")
        self._say("3. Quản lý bạn đọc")
        self._say("4. Báo cáo – thống kê")
        self._say("5. Đặt chỗ sách")
        self._say("0. Thoát chương trình")
        self._say("=" * 45)
        self._prompt("Nhập lựa chọn của bạn: ")

    def run(self) -> None:
        """Show the main menu until the user quits or input ends."""
        menus = {
            1: self.book_menu,
            2: self.borrow_menu,
            3: self.reader_menu,
            4: self.statistic_menu,
            5: self.reservation_menu,
        }
        try:
            while True:
                self._show_main_menu()
                parts = self._read_line().split()
                if not parts:
                    continue
                try:
                    choice = int(parts[0])
                except ValueError:
                    self._say("⚠️  Lỗi: Bạn phải nhập một số!")
                    continue
                if choice == 0:
                    self._say("👋 Cảm ơn bạn đã sử dụng hệ thống. Hẹn gặp lại!")
                    return
                menu = menus.get(choice)
                if menu is None:
                    self._say("❌ Lựa chọn không hợp lệ. Vui lòng thử lại!")
                else:
                    menu()
        except EOFError:
            return

    # Books

    def _book_table(self, books: list[Book]) -> None:
        self._say()
        self._say(
            f"{'Mã':<10} {'Tiêu đề':<25} {'Tác giả':<20} "
            f"{'Thể loại':<15} {'Giá':<8} {'Trạng thái':<10}"
        )
        self._say(_RULE_WIDE)
        for b in books:
            status = "Còn" if b.available else "Đã mượn"
            self._say(
                f"{b.id:<10} {b.title:<25} {b.author:<20} "
                f"{b.category:<15} {b.price:<8} {status:<10}"
            )

    def _add_book(self) -> None:
        lib = self.library
        if len(lib.books) >= MAX_BOOKS:
            self._say("Danh sách sách đã đầy!")
            return
        book_id = self._ask_token("📚 Nhập mã sách: ")
        try:
            lib.find_book(book_id)
        except NotFoundError:
            pass
        else:
            self._say("❌ Mã sách đã tồn tại!")
            return
        title = self._ask_line("📖 Nhập tiêu đề: ")
        author = self._ask_line("✍️  Nhập tác giả: ")
        category = self._ask_line("📂 Nhập thể loại: ")
        price = self._ask_int("💲 Nhập giá: ")
        if price is None:
            self._say("❌ Lỗi: Giá sách phải là số nguyên.")
            return
        try:
            lib.add_book(Book(book_id, title, author, category, price))
        except (DuplicateError, CapacityError) as exc:
            self._say(f"❌ {exc}")
            return
        self._say("✅ Đã thêm sách thành công!")

    def _list_books(self) -> None:
        if not self.library.books:
            self._say("📭 Không có sách nào trong thư viện.")
            return
        self._book_table(self.library.books)

    def _search_books(self) -> None:
        keyword = self._ask_line("🔍 Nhập từ khoá tiêu đề: ")
        results = self.library.search_books(keyword)
        if results:
            self._book_table(results)
        else:
            self._say("❌ Không tìm thấy sách phù hợp.")

    def _remove_book(self) -> None:
        book_id = self._ask_token("🗑️  Nhập mã sách cần xoá: ")
        try:
            self.library.remove_book(book_id)
        except NotFoundError:
            self._say("❌ Không tìm thấy mã sách.")
        except UnavailableError:
            self._say("⚠️ Sách đang được mượn. Không thể xoá.")
        else:
            self._say("✅ Đã xoá sách thành công.")

    def _books_in_order(self) -> None:
        if not self.library.books:
            self._say("📭 Không có sách nào trong thư viện.")
            return
        self._say()
        self._say("📚 DANH SÁCH SÁCH THEO THỨ TỰ TIÊU ĐỀ:")
        self._say(_RULE_WIDE)
        for b in self.library.books_by_title():
            self._say(
                f"Mã: {b.id:<10} | Tiêu đề: {b.title:<50} | Tác giả: {b.author:<30} "
                f"| Thể loại: {b.category:<20} | Giá: {b.price}"
            )

    def _rebuild(self) -> None:
        self.library.rebuild_index()
        self._say("✅ Đã xây dựng lại cây BST thành công!")

    def book_menu(self) -> None:
        """Catalogue management menu."""
        if self.library.books and not self.library.books_by_title():
            self._rebuild()
        self._menu_loop(
            "======== 📚 QUẢN LÝ DANH MỤC SÁCH ========",
            [
                "1. Thêm sách mới",
                "2. Hiển thị danh sách sách",
                "3. Tìm sách theo tiêu đề",
                "4. Xoá sách theo mã",
                "5. Hiển thị sách theo thứ tự tiêu đề (BST)",
                "6. Xây dựng lại cây BST",
                "0. Quay lại menu chính",
            ],
            "=" * 41,
            {
                1: self._add_book,
                2: self._list_books,
                3: self._search_books,
                4: self._remove_book,
                5: self._books_in_order,
                6: self._rebuild,
            },
            lambda: self._say("↩️  Trở về menu chính..."),
            "❌ Lựa chọn không hợp lệ.",
        )

    # Borrowing

    def _borrow(self) -> None:
        lib = self.library
        reader_id = self._ask_token("Nhập mã bạn đọc: ")
        try:
            reader = lib.find_reader(reader_id)
        except NotFoundError:
            self._say("❌ Không tìm thấy bạn đọc!")
            return
        if reader.borrowed_count >= MAX_BORROWED:
            self._say("⚠️ Bạn đọc đã mượn tối đa số lượng sách cho phép!")
            return
        book_id = self._ask_token("Nhập mã sách cần mượn: ")
        try:
            lib.borrow(reader_id, book_id)
        except NotFoundError:
            self._say("❌ Không tìm thấy sách!")
        except UnavailableError:
            self._say("⚠️ Sách này hiện đang được mượn!")
        else:
            self._say("✅ Mượn sách thành công!")

    def _return(self) -> None:
        lib = self.library
        reader_id = self._ask_token("Nhập mã bạn đọc: ")
        try:
            lib.find_reader(reader_id)
        except NotFoundError:
            self._say("❌ Không tìm thấy bạn đọc!")
            return
        book_id = self._ask_token("Nhập mã sách cần trả: ")
        try:
            lib.find_book(book_id)
        except NotFoundError:
            self._say("❌ Không tìm thấy sách!")
            return
        try:
            lib.return_book(reader_id, book_id)
        except NotFoundError:
            self._say("⚠️ Bạn đọc không mượn sách này!")
        else:
            self._say("✅ Trả sách thành công!")

    def _borrowed_list(self) -> None:
        self._say()
        self._say("📋 DANH SÁCH SÁCH ĐANG ĐƯỢC MƯỢN:")
        pairs = self.library.borrowed_pairs()
        for reader, book_id in pairs:
            self._say(f"👤 {reader.name} mượn sách 📚 {book_id}")
        if not pairs:
            self._say("✅ Không có sách nào đang được mượn.")

    def borrow_menu(self) -> None:
        """Borrowing and returning menu."""
        self._menu_loop(
            "===== 📚 MƯỢN – TRẢ SÁCH =====",
            [
                "1. Mượn sách",
                "2. Trả sách",
                "3. Hiển thị sách đang mượn",
                "0. Quay lại menu chính",
            ],
            "=" * 32,
            {1: self._borrow, 2: self._return, 3: self._borrowed_list},
            lambda: self._say("↩️  Quay lại menu chính..."),
            "❌ Lựa chọn không hợp lệ!",
        )

    # Readers

    def _add_reader(self) -> None:
        lib = self.library
        if len(lib.readers) >= MAX_READERS:
            self._say("⚠️ Danh sách bạn đọc đã đầy!")
            return
        reader_id = self._ask_token("📘 Nhập mã bạn đọc: ")
        try:
            lib.find_reader(reader_id)
        except NotFoundError:
            pass
        else:
            self._say("❌ Mã bạn đọc đã tồn tại!")
            return
        name = self._ask_line("📝 Nhập họ tên: ")
        department = self._ask_line("🏫 Nhập khoa/đơn vị: ")
        try:
            lib.add_reader(Reader(reader_id, name, department))
        except (DuplicateError, CapacityError) as exc:
            self._say(f"❌ {exc}")
            return
        self._say("✅ Đã thêm bạn đọc thành công!")

    def _list_readers(self) -> None:
        readers = self.library.readers
        if not readers:
            self._say("📭 Không có bạn đọc nào trong hệ thống.")
            return
        self._say()
        self._say(f"{'Mã':<10} {'Họ tên':<25} {'Khoa/Đơn vị':<25} {'Sách mượn':<10}")
        self._say(_RULE_READERS)
        for r in readers:
            self._say(f"{r.id}\t{r.name}\t{r.department}\t{r.borrowed_count}")

    def _search_readers(self) -> None:
        keyword = self._ask_line("🔍 Nhập từ khoá tên hoặc mã bạn đọc: ")
        found = self.library.search_readers(keyword)
        for r in found:
            self._say(f"👤 {r.id} - {r.name} - {r.department} ({r.borrowed_count} sách)")
        if not found:
            self._say("❌ Không tìm thấy bạn đọc phù hợp.")

    def _remove_reader(self) -> None:
        reader_id = self._ask_token("🗑️ Nhập mã bạn đọc cần xoá: ")
        try:
            self.library.remove_reader(reader_id)
        except NotFoundError:
            self._say("❌ Không tìm thấy bạn đọc!")
        except UnavailableError:
            self._say("⚠️ Bạn đọc đang giữ sách, không thể xoá.")
        else:
            self._say("✅ Đã xoá bạn đọc thành công!")

    def reader_menu(self) -> None:
        """Reader management menu."""
        self._menu_loop(
            "======= 👤 QUẢN LÝ BẠN ĐỌC =======",
            [
                "1. Thêm bạn đọc",
                "2. Hiển thị danh sách bạn đọc",
                "3. Tìm kiếm bạn đọc",
                "4. Xoá bạn đọc",
                "0. Quay lại menu chính",
            ],
            "=" * 34,
            {
                1: self._add_reader,
                2: self._list_readers,
                3: self._search_readers,
                4: self._remove_reader,
            },
            lambda: self._say("↩️  Quay lại menu chính..."),
            "❌ Lựa chọn không hợp lệ!",
        )

    # Statistics

    def _most_borrowed(self) -> None:
        if not self.library.books:
            self._say("📭 Không có sách nào trong thư viện.")
            return
        best, books = self.library.most_borrowed_books()
        if best == 0:
            self._say("📘 Chưa có sách nào được mượn.")
            return
        self._say()
        self._say(f"📊 Các sách được mượn nhiều nhất ({best} lần):")
        for b in books:
            self._say(f"📚 {b.id} - {b.title}")

    def _top_borrowers(self) -> None:
        if not self.library.readers:
            self._say("📭 Chưa có bạn đọc nào.")
            return
        best, readers = self.library.top_borrowers()
        if best == 0:
            self._say("📘 Không có bạn đọc nào đang mượn sách.")
            return
        self._say()
        self._say(f"📊 Các bạn đọc đang mượn nhiều sách nhất ({best} quyển):")
        for r in readers:
            self._say(f"👤 {r.id} - {r.name}")

    def _availability(self) -> None:
        stats = self.library.availability()
        self._say()
        self._say(f"📚 Tổng số sách: {stats.total}")
        self._say(f"✅ Sách còn trong thư viện: {stats.available}")
        self._say(f"📦 Sách đang được mượn: {stats.borrowed}")

    def statistic_menu(self) -> None:
        """Reports and statistics menu."""
        self._menu_loop(
            "======= 📈 BÁO CÁO – THỐNG KÊ =======",
            [
                "1. Sách được mượn nhiều nhất",
                "2. Bạn đọc mượn nhiều nhất",
                "3. Thống kê sách còn và sách mượn",
                "0. Quay lại menu chính",
            ],
            "=" * 37,
            {1: self._most_borrowed, 2: self._top_borrowers, 3: self._availability},
            lambda: self._say("↩️  Quay lại menu chính..."),
            "❌ Lựa chọn không hợp lệ!",
        )

    # Reservations

    def _reserve(self) -> None:
        lib = self.library
        book_id = self._ask_token("📚 Nhập mã sách cần đặt chỗ: ")
        try:
            book = lib.find_book(book_id)
        except NotFoundError:
            self._say("❌ Không tìm thấy sách!")
            return
        if book.available:
            self._say("✅ Sách hiện đang có sẵn. Bạn có thể mượn trực tiếp.")
            return
        reader_id = self._ask_token("👤 Nhập mã bạn đọc: ")
        try:
            lib.find_reader(reader_id)
        except NotFoundError:
            self._say("❌ Không tìm thấy bạn đọc!")
            return
        priority = self._ask_int(
            "🔢 Nhập mức độ ưu tiên (1: Giảng viên/Cán bộ, 2: Sinh viên): "
        )
        if priority not in (Priority.STAFF, Priority.STUDENT):
            self._say("⚠️ Mức độ ưu tiên không hợp lệ. Sử dụng mức mặc định (2).")
            priority = Priority.STUDENT
        try:
            entry = lib.reserve(book_id, reader_id, priority)
        except CapacityError:
            self._say("❌ Không thể tạo hàng đợi đặt chỗ!")
        except DuplicateError:
            self._say("⚠️ Bạn đã đặt chỗ cho sách này rồi!")
        else:
            self._say(
                "✅ Đặt chỗ thành công! Bạn đã được thêm vào hàng đợi "
                f"với mức ưu tiên {int(entry.priority)}."
            )

    def _list_reservations(self) -> None:
        lib = self.library
        if not len(lib.reservations):
            self._say("📭 Không có yêu cầu đặt chỗ nào.")
            return
        self._say()
        self._say("📋 DANH SÁCH ĐẶT CHỖ THEO TỪNG SÁCH:")
        self._say("=" * 41)
        total = 0
        for queue in lib.reservations:
            if not len(queue):
                continue
            try:
                book = lib.find_book(queue.book_id)
            except NotFoundError:
                continue
            self._say()
            self._say(f"📚 SÁCH: {queue.book_id} - {book.title}")
            self._say(f"  Hàng đợi ({len(queue)} người đặt):")
            for position, entry in enumerate(queue, start=1):
                line = f"  {position}. Mã: {entry.reader_id}"
                try:
                    line += f" - Tên: {lib.find_reader(entry.reader_id).name}"
                except NotFoundError:
                    pass
                line += f" - Ưu tiên: {int(entry.priority)} ({entry.priority.label})"
                self._say(line)
                total += 1
        self._say()
        self._say(f"🔢 TỔNG SỐ ĐẶT CHỖ: {total}")
        self._say("=" * 41)

    def _cancel(self) -> None:
        lib = self.library
        book_id = self._ask_token("📚 Nhập mã sách cần huỷ đặt chỗ: ")
        reader_id = self._ask_token("👤 Nhập mã bạn đọc: ")
        try:
            lib.reservations.queue(book_id)
        except NotFoundError:
            self._say("❌ Không tìm thấy sách có yêu cầu đặt chỗ nào.")
            return
        try:
            lib.cancel_reservation(book_id, reader_id)
        except NotFoundError:
            self._say("❌ Không tìm thấy thông tin đặt chỗ.")
        else:
            self._say("✅ Đã huỷ đặt chỗ thành công!")

    def _next_in_line(self) -> None:
        lib = self.library
        book_id = self._ask_token("📚 Nhập mã sách cần xem hàng đợi: ")
        try:
            queue = lib.reservations.queue(book_id)
        except NotFoundError:
            self._say("❌ Không có ai đang đặt chỗ cho sách này.")
            return
        try:
            entry = queue.peek()
        except NotFoundError:
            self._say("❌ Hàng đợi rỗng.")
            return
        self._say()
        self._say("🔜 NGƯỜI TIẾP THEO ĐƯỢC MƯỢN SÁCH:")
        self._say(f"  Mã sách: {book_id}")
        try:
            self._say(f"  Tên sách: {lib.find_book(book_id).title}")
        except NotFoundError:
            pass
        self._say(f"  Mã bạn đọc: {entry.reader_id}")
        try:
            self._say(f"  Tên bạn đọc: {lib.find_reader(entry.reader_id).name}")
        except NotFoundError:
            pass
        self._say(f"  Mức ưu tiên: {int(entry.priority)} ({entry.priority.label})")

    def _leave_reservations(self) -> None:
        self.library.reservations.clear()
        self._say("↩️  Quay lại menu chính...")

    def reservation_menu(self) -> None:
        """Reservation menu; leaving it drops all reservations."""
        self._menu_loop(
            "======= 📌 ĐẶT CHỖ SÁCH (PRIORITY QUEUE) =======",
            [
                "1. Đặt chỗ sách",
                "2. Hiển thị danh sách đặt chỗ",
                "3. Huỷ đặt chỗ",
                "4. Xem người tiếp theo được mượn sách",
                "0. Quay lại menu chính",
            ],
            "=" * 45,
            {
                1: self._reserve,
                2: self._list_reservations,
                3: self._cancel,
                4: self._next_in_line,
            },
            self._leave_reservations,
            "❌ Lựa chọn không hợp lệ!",
        )


def main(argv: list[str] | None = None) -> int:
    """Start the interactive library console."""
    parser = argparse.ArgumentParser(
        prog="thuvien", description="Hệ thống quản lý thư viện"
    )
    parser.parse_args(argv)
    Console(Library(), sys.stdin, sys.stdout).run()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())