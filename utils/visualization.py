"""
시각화 모듈: Gantt Chart, 큐 단계 변화 그래프 및 통계 표 생성
"""

import matplotlib.pyplot as plt
import matplotlib.patches as mpatches
from typing import List, Dict, Optional
from core.scheduler_base import GanttEntry
from core.process import ProcessState


class Visualizer:
    """스케줄링 결과 시각화"""

    def __init__(self):
        # 큐 단계별 색상 설정
        self.level_colors = plt.cm.Set2.colors
        self.blocked_color = '#FFE5E5'

    def draw_gantt_chart(self, gantt_data: List[GanttEntry], algorithm_name: str,
                         save_path: Optional[str] = None, show: bool = True):
        """
        Gantt Chart 그리기 (실행 구간은 큐 단계별 색상, 블로킹 구간은 음영)

        Args:
            gantt_data: Gantt Chart 데이터
            algorithm_name: 알고리즘 이름
            save_path: 저장 경로 (None이면 저장 안 함)
            show: 화면에 표시할지 여부
        """
        if not gantt_data:
            print(f"{algorithm_name}에 대한 Gantt 차트 데이터가 없습니다")
            return

        fig, ax = plt.subplots(figsize=(16, 6))

        unique_pids = sorted(set(entry.pid for entry in gantt_data))
        pid_to_y = {pid: idx for idx, pid in enumerate(unique_pids)}
        levels = sorted(set(entry.level for entry in gantt_data if entry.level is not None))

        for entry in gantt_data:
            duration = entry.end_time - entry.start_time
            y_pos = pid_to_y[entry.pid]

            if entry.state == ProcessState.RUNNING:
                color = self.level_colors[(entry.level or 0) % len(self.level_colors)]
                alpha = 1.0
            else:
                color = self.blocked_color
                alpha = 0.7

            ax.barh(y_pos, duration, left=entry.start_time, height=0.8,
                    color=color, alpha=alpha, edgecolor='black', linewidth=0.5)

            # 충분히 긴 구간만 텍스트 표시
            if entry.state == ProcessState.RUNNING and duration > 1:
                ax.text(entry.start_time + duration/2, y_pos, f'Q{entry.level}',
                        ha='center', va='center', fontsize=8, fontweight='bold')

        ax.set_yticks(range(len(unique_pids)))
        ax.set_yticklabels([f'P{pid}' for pid in unique_pids])
        ax.set_xlabel('Time', fontsize=12)
        ax.set_ylabel('Process', fontsize=12)
        ax.set_title(f'Gantt Chart - {algorithm_name}', fontsize=14, fontweight='bold')
        ax.grid(axis='x', alpha=0.3)

        legend_elements = [
            mpatches.Patch(color=self.level_colors[level % len(self.level_colors)],
                           label=f'Running (Queue {level})')
            for level in levels
        ]
        legend_elements.append(mpatches.Patch(color=self.blocked_color, alpha=0.7,
                                              label='Blocked (I/O)'))
        ax.legend(handles=legend_elements, loc='upper right')

        plt.tight_layout()

        if save_path:
            plt.savefig(save_path, dpi=150, bbox_inches='tight')
            print(f"Gantt 차트가 {save_path}에 저장되었습니다")

        if show:
            plt.show()
        else:
            plt.close(fig)

    def draw_queue_levels(self, gantt_data: List[GanttEntry], priority_levels: int,
                          save_path: Optional[str] = None, show: bool = True):
        """
        프로세스별 CPU 큐 단계 변화 그래프 (강등 추적)

        Args:
            gantt_data: Gantt Chart 데이터
            priority_levels: 우선순위 단계 수
            save_path: 저장 경로
            show: 화면에 표시할지 여부
        """
        running = [e for e in gantt_data if e.state == ProcessState.RUNNING]
        if not running:
            print("큐 단계 그래프를 그릴 실행 구간이 없습니다")
            return

        fig, ax = plt.subplots(figsize=(14, 5))

        for pid in sorted(set(e.pid for e in running)):
            entries = [e for e in running if e.pid == pid]
            times = []
            levels = []
            for entry in entries:
                times.extend([entry.start_time, entry.end_time])
                levels.extend([entry.level, entry.level])
            ax.step(times, levels, where='post', label=f'P{pid}', linewidth=1.5)

        ax.set_yticks(range(priority_levels))
        ax.set_yticklabels([f'Queue {level}' for level in range(priority_levels)])
        ax.invert_yaxis()  # 최상위 큐를 위쪽에
        ax.set_xlabel('Time', fontsize=12)
        ax.set_title('CPU Queue Level per Process', fontsize=14, fontweight='bold')
        ax.grid(alpha=0.3)
        ax.legend(loc='upper right', fontsize=8, ncol=2)

        plt.tight_layout()

        if save_path:
            plt.savefig(save_path, dpi=150, bbox_inches='tight')
            print(f"큐 단계 그래프가 {save_path}에 저장되었습니다")

        if show:
            plt.show()
        else:
            plt.close(fig)

    def print_statistics_table(self, results: List[Dict]):
        """
        통계를 표 형식으로 출력

        Args:
            results: 시뮬레이션 결과 리스트
        """
        print("\n" + "="*120)
        print("스케줄링 성능 요약")
        print("="*120)
        print(f"{'알고리즘':<30} {'평균 대기':>12} {'평균 반환':>12} {'평균 응답':>12} "
              f"{'CPU 이용률(%)':>15} {'문맥전환':>10} {'강등':>8}")
        print("-"*120)

        for result in results:
            algo = result['algorithm']
            stats = result['statistics']
            print(f"{algo:<30} "
                  f"{stats['avg_waiting_time']:>12.2f} "
                  f"{stats['avg_turnaround_time']:>12.2f} "
                  f"{stats['avg_response_time']:>12.2f} "
                  f"{stats['cpu_utilization']:>15.2f} "
                  f"{stats['context_switches']:>10} "
                  f"{stats['demotions']:>8}")

        print("="*120 + "\n")

    def print_process_details(self, results: Dict):
        """
        개별 프로세스의 상세 정보 출력

        Args:
            results: 시뮬레이션 결과
        """
        print(f"\n{'='*90}")
        print(f"프로세스 상세 - {results['algorithm']}")
        print(f"{'='*90}")
        print(f"{'PID':<6} {'CPU':>8} {'I/O':>8} {'시작':>8} {'종료':>8} "
              f"{'대기':>8} {'반환':>8} {'응답':>8} {'강등':>6}")
        print(f"{'-'*90}")

        for process in sorted(results['processes'], key=lambda p: p.pid):
            print(f"{process.pid:<6} "
                  f"{process.cpu_time:>8} "
                  f"{process.blocked_time:>8} "
                  f"{process.start_time:>8} "
                  f"{process.finish_time:>8} "
                  f"{process.waiting_time:>8} "
                  f"{process.turnaround_time:>8} "
                  f"{process.response_time if process.response_time is not None else 'N/A':>8} "
                  f"{process.demotions:>6}")

        print(f"{'='*90}\n")
