import io

import pytest

from thuvien.cli import Console, main
from thuvien.library import Library
from thuvien.models import Book, NotFoundError, Reader


def make_console(script, library=None):
    lib = library if library is not None else Library()
    out = io.StringIO()
    console = Console(lib, io.StringIO(script), out)
    return console, lib, out


def stocked_library():
    lib = Library()
    lib.add_book(Book("B1", "Zeta", "Ann", "Science", 50))
    lib.add_book(Book("B2", "alpha", "Bob", "Novel", 70))
    lib.add_reader(Reader("R1", "Lan", "IT"))
    lib.add_reader(Reader("R2", "Minh", "Math"))
    return lib


def test_main_menu_exit_message():
    console, _, out = make_console("0\n")
    console.run()
    assert "Cảm ơn bạn đã sử dụng hệ thống" in out.getvalue()


def test_main_menu_rejects_non_number():
    console, _, out = make_console("abc\n0\n")
    console.run()
    assert "Bạn phải nhập một số" in out.getvalue()


def test_main_menu_rejects_unknown_choice():
    console, _, out = make_console("9\n0\n")
    console.run()
    assert "Lựa chọn không hợp lệ. Vui lòng thử lại!" in out.getvalue()


def test_run_stops_at_end_of_input():
    console, _, out = make_console("")
    console.run()
    assert "HỆ THỐNG QUẢN LÝ THƯ VIỆN" in out.getvalue()


def test_add_book_through_menus():
    console, lib, out = make_console("1\n1\nB9\nMy Title\nSome Author\nPoetry\n120\n0\n0\n")
    console.run()
    book = lib.find_book("B9")
    assert (book.title, book.author, book.category, book.price) == (
        "My Title",
        "Some Author",
        "Poetry",
        120,
    )
    assert book.available is True
    assert "Đã thêm sách thành công" in out.getvalue()


def test_add_book_duplicate_id():
    console, lib, out = make_console("1\nB1\n0\n", stocked_library())
    console.book_menu()
    assert "Mã sách đã tồn tại" in out.getvalue()
    assert len(lib.books) == 2


def test_add_book_rejects_bad_price():
    console, lib, out = make_console("1\nB3\nT\nA\nC\nabc\n0\n")
    console.book_menu()
    assert "Giá sách phải là số nguyên" in out.getvalue()
    with pytest.raises(NotFoundError):
        lib.find_book("B3")


def test_list_books_shows_status():
    lib = stocked_library()
    lib.borrow("R1", "B1")
    console, _, out = make_console("2\n0\n", lib)
    console.book_menu()
    text = out.getvalue()
    assert "Đã mượn" in text
    assert "Còn" in text


def test_list_books_empty():
    console, _, out = make_console("2\n0\n")
    console.book_menu()
    assert "Không có sách nào trong thư viện" in out.getvalue()


def test_search_books_by_keyword():
    console, _, out = make_console("3\nnovel\n0\n", stocked_library())
    console.book_menu()
    text = out.getvalue()
    assert "alpha" in text
    assert "Zeta" not in text


def test_search_books_no_match():
    console, _, out = make_console("3\nqqq\n0\n", stocked_library())
    console.book_menu()
    assert "Không tìm thấy sách phù hợp" in out.getvalue()


def test_remove_book_cases():
    lib = stocked_library()
    lib.borrow("R1", "B1")
    console, _, out = make_console("4\nB1\n4\nXX\n4\nB2\n0\n", lib)
    console.book_menu()
    text = out.getvalue()
    assert "Không thể xoá" in text
    assert "Không tìm thấy mã sách" in text
    assert "Đã xoá sách thành công" in text
    assert [b.id for b in lib.books] == ["B1"]


def test_books_in_title_order():
    console, _, out = make_console("5\n0\n", stocked_library())
    console.book_menu()
    text = out.getvalue()
    assert text.index("Mã: B2") < text.index("Mã: B1")


def test_rebuild_index_message():
    console, lib, out = make_console("6\n0\n", stocked_library())
    console.book_menu()
    assert "Đã xây dựng lại cây BST thành công" in out.getvalue()
    assert [b.id for b in lib.books_by_title()] == ["B2", "B1"]


def test_borrow_and_return_flow():
    lib = stocked_library()
    console, _, out = make_console("1\nR1\nB1\n3\n2\nR1\nB1\n0\n", lib)
    console.borrow_menu()
    text = out.getvalue()
    assert "Mượn sách thành công" in text
    assert "Lan mượn sách 📚 B1" in text
    assert "Trả sách thành công" in text
    assert lib.find_book("B1").available is True
    assert lib.find_reader("R1").borrowed_book_ids == []


def test_borrow_errors():
    lib = stocked_library()
    lib.borrow("R2", "B1")
    console, _, out = make_console("1\nRX\n1\nR1\nBX\n1\nR1\nB1\n0\n", lib)
    console.borrow_menu()
    text = out.getvalue()
    assert "Không tìm thấy bạn đọc" in text
    assert "Không tìm thấy sách" in text
    assert "Sách này hiện đang được mượn" in text
    assert lib.find_reader("R1").borrowed_count == 0


def test_return_book_not_borrowed():
    console, _, out = make_console("2\nR1\nB1\n0\n", stocked_library())
    console.borrow_menu()
    assert "Bạn đọc không mượn sách này" in out.getvalue()


def test_borrowed_list_empty():
    console, _, out = make_console("3\n0\n", stocked_library())
    console.borrow_menu()
    assert "Không có sách nào đang được mượn" in out.getvalue()


def test_reader_add_list_search_remove():
    console, lib, out = make_console(
        "1\nR5\nHoa Nguyen\nPhysics\n2\n3\nHoa\n4\nR5\n0\n"
    )
    console.reader_menu()
    text = out.getvalue()
    assert "Đã thêm bạn đọc thành công" in text
    assert "R5\tHoa Nguyen\tPhysics\t0" in text
    assert "👤 R5 - Hoa Nguyen - Physics (0 sách)" in text
    assert "Đã xoá bạn đọc thành công" in text
    assert lib.readers == []


def test_reader_remove_holding_books():
    lib = stocked_library()
    lib.borrow("R1", "B1")
    console, _, out = make_console("4\nR1\n0\n", lib)
    console.reader_menu()
    assert "Bạn đọc đang giữ sách, không thể xoá" in out.getvalue()
    assert lib.find_reader("R1").name == "Lan"


def test_reader_duplicate():
    console, lib, out = make_console("1\nR1\n0\n", stocked_library())
    console.reader_menu()
    assert "Mã bạn đọc đã tồn tại" in out.getvalue()
    assert len(lib.readers) == 2


def test_statistics():
    lib = stocked_library()
    lib.borrow("R1", "B1")
    console, _, out = make_console("1\n2\n3\n0\n", lib)
    console.statistic_menu()
    text = out.getvalue()
    assert "📚 B1 - Zeta" in text
    assert "👤 R1 - Lan" in text
    assert "Tổng số sách: 2" in text
    assert "Sách đang được mượn: 1" in text


def test_statistics_nothing_borrowed():
    console, _, out = make_console("1\n2\n0\n", stocked_library())
    console.statistic_menu()
    text = out.getvalue()
    assert "Chưa có sách nào được mượn" in text
    assert "Không có bạn đọc nào đang mượn sách" in text


def test_reservation_priority_and_next():
    lib = stocked_library()
    lib.borrow("R1", "B1")
    script = "1\nB1\nR1\n2\n1\nB1\nR2\n1\n4\nB1\n2\n"
    console, _, out = make_console(script + "0\n", lib)
    console.reservation_menu()
    text = out.getvalue()
    assert "Tên bạn đọc: Minh" in text
    assert text.index("1. Mã: R2") < text.index("2. Mã: R1")
    assert "TỔNG SỐ ĐẶT CHỖ: 2" in text
    assert len(lib.reservations) == 0


def test_reservation_available_book():
    console, lib, out = make_console("1\nB1\n0\n", stocked_library())
    console.reservation_menu()
    assert "Sách hiện đang có sẵn" in out.getvalue()


def test_reservation_bad_priority_defaults_to_student():
    lib = stocked_library()
    lib.borrow("R1", "B1")
    console, _, out = make_console("1\nB1\nR2\n7\n4\nB1\n0\n", lib)
    console.reservation_menu()
    text = out.getvalue()
    assert "Sử dụng mức mặc định (2)" in text
    assert "Mức ưu tiên: 2 (Sinh viên)" in text


def test_reservation_duplicate_and_cancel():
    lib = stocked_library()
    lib.borrow("R1", "B1")
    script = "1\nB1\nR2\n1\n1\nB1\nR2\n1\n3\nB1\nR1\n3\nB1\nR2\n3\nB1\nR2\n0\n"
    console, _, out = make_console(script, lib)
    console.reservation_menu()
    text = out.getvalue()
    assert "Bạn đã đặt chỗ cho sách này rồi" in text
    assert "Không tìm thấy thông tin đặt chỗ" in text
    assert "Đã huỷ đặt chỗ thành công" in text
    assert "Không tìm thấy sách có yêu cầu đặt chỗ nào" in text


def test_reservation_empty_list():
    console, _, out = make_console("2\n4\nB1\n0\n", stocked_library())
    console.reservation_menu()
    text = out.getvalue()
    assert "Không có yêu cầu đặt chỗ nào" in text
    assert "Không có ai đang đặt chỗ cho sách này" in text


def test_submenu_invalid_choice():
    console, _, out = make_console("8\n0\n")
    console.reader_menu()
    assert "❌ Lựa chọn không hợp lệ!" in out.getvalue()


def test_main_entry_point(monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO("0\n"))
    assert main([]) == 0
    assert "Hẹn gặp lại" in capsys.readouterr().out